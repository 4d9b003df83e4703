from unittest.mock import AsyncMock, MagicMock

import pytest
from solders.pubkey import Pubkey

from cranker import bot

PROGRAM_ID = Pubkey.from_string(bot.PROGRAM_ID)


def _rpc_mock(result):
    if isinstance(result, Exception):
        return AsyncMock(side_effect=result)
    return AsyncMock(return_value=result)


@pytest.fixture
def make_program():
    r"""Factory for a stand-in anchorpy.Program recording every remote call.

    `fetch`, `create` and `crank` are either the value returned by the
    matching call or an exception it raises.
    """
    def factory(fetch=None, create="create-sig", crank="crank-sig"):
        program = MagicMock()
        program.program_id = PROGRAM_ID
        program.provider.wallet.public_key = Pubkey.new_unique()

        oracle_client = MagicMock()
        oracle_client.fetch = _rpc_mock(fetch)
        program.account = {"Oracle": oracle_client}

        program.rpc = {
            "create_oracle": _rpc_mock(create),
            "crank_oracle": _rpc_mock(crank),
        }

        blockhash = MagicMock()
        blockhash.value.last_valid_block_height = 123
        connection = program.provider.connection
        connection.get_latest_blockhash = AsyncMock(return_value=blockhash)
        connection.confirm_transaction = AsyncMock()
        connection.get_balance = AsyncMock(return_value=MagicMock(value=20_000_000))
        return program

    return factory
