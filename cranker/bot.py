import os
import sys
import asyncio

from anchorpy import Context, Idl, Program, Provider, Wallet
from anchorpy.error import AccountDoesNotExistError
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solders.pubkey import Pubkey
from solders.system_program import ID as SYS_PROGRAM_ID

from cranker.utils import get_time, load_keypair
from cranker.pda import derive_oracle_address, derive_reward_vault_address
from cranker.market import (
    expected_transfer_validation,
    is_within_reward_window,
    seconds_until_reward_window,
)

bin_dir = os.path.join(os.path.dirname(os.path.realpath(__file__)), "bin")
idl_dir = os.path.join(bin_dir, "idl")

IDL_PATH = os.path.join(idl_dir, "nft_market_hours.json")

# Deployed market hours program
PROGRAM_ID = os.environ.get("ORACLE_PROGRAM_ID",
                            "32RNH2JPGUCGdYp5TetkT1Y2CHwAUk2XzXn6VCFqvb7F")

CHAIN_URLS = {
    "local": "http://127.0.0.1:8899",
    "devnet": "https://api.devnet.solana.com",
    "mainnet": "https://api.mainnet-beta.solana.com",
}


def get_rpc_url(chain, url=None):
    r"""Resolve the cluster url.

    An explicit `url` wins, then ANCHOR_PROVIDER_URL, then the default
    url of `chain`.
    """
    if url is not None:
        return url
    return os.environ.get("ANCHOR_PROVIDER_URL", CHAIN_URLS[chain])


def load_program(url,
                 wallet_path=None,
                 program_id=PROGRAM_ID,
                 idl_path=IDL_PATH,
                 commitment=Confirmed,
                 ):
    r"""Build an anchorpy client for the market hours program.
    Arguments
    --
    url (string): Cluster RPC url
    wallet_path (string): Keypair file. If None, use ANCHOR_WALLET or
        ~/.config/solana/id.json
    program_id (string): Base58 program id
    idl_path (string): Path to the program IDL
    commitment (string): Commitment used for reads
    """
    assert os.path.exists(idl_path), \
        f"IDL not found at {idl_path}. Run scripts/copy_idl.py"

    with open(idl_path) as fp:
        idl = Idl.from_json(fp.read())

    if wallet_path is not None:
        wallet = Wallet(load_keypair(wallet_path))
    else:
        wallet = Wallet.local()

    client = AsyncClient(url, commitment=commitment)
    provider = Provider(client, wallet)
    return Program(idl, Pubkey.from_string(program_id), provider)


class CrankBot:
    r"""Bot that makes sure the market hours Oracle exists and cranks it.

    Creating the Oracle is done at most once. Every crank re-evaluates the
    market hours on-chain and pays the signer from the reward vault when it
    lands within 15 minutes of market open or close.

    Arguments
    --
    program: anchorpy.Program
        Client for the market hours program. The provider wallet signs and
        pays for every transaction.
    commitment: string (default: confirmed)
        Commitment to wait for after sending a transaction
    strict_fetch: bool (default: False)
        By default any failure to fetch the Oracle is treated as "not yet
        created" and triggers a create transaction. If True, only a missing
        account does; other errors (network, RPC) are raised.
    """
    def __init__(self,
                 program,
                 commitment=Confirmed,
                 strict_fetch=False,
                 ):
        self.program = program
        self.commitment = commitment
        self.strict_fetch = strict_fetch
        self.initialized = False

        program_id = program.program_id
        self.oracle, self.oracle_bump = derive_oracle_address(program_id)
        self.reward_vault, self.vault_bump = \
            derive_reward_vault_address(self.oracle, program_id)

    @property
    def signer(self):
        return self.program.provider.wallet.public_key

    def get_accounts(self):
        # Both instructions take the same accounts
        return {
            "oracle": self.oracle,
            "reward_vault": self.reward_vault,
            "signer": self.signer,
            "payer": self.signer,
            "system_program": SYS_PROGRAM_ID,
        }

    async def get_oracle(self):
        return await self.program.account["Oracle"].fetch(self.oracle)

    async def get_balance(self, address):
        connection = self.program.provider.connection
        resp = await connection.get_balance(address, self.commitment)
        return resp.value

    async def confirm(self, signature):
        r"""Wait until `signature` reaches the bot's commitment, or the
        latest blockhash expires.
        """
        connection = self.program.provider.connection
        blockhash = await connection.get_latest_blockhash(self.commitment)
        return await connection.confirm_transaction(
            signature,
            self.commitment,
            last_valid_block_height=blockhash.value.last_valid_block_height,
        )

    async def ensure_oracle(self):
        r"""Create the Oracle account unless it can be fetched.

        Returns
        --
        signature of the create transaction, or None if nothing was sent
        """
        try:
            account = await self.get_oracle()
        except AccountDoesNotExistError:
            print(f"[oracle] {self.oracle} does not exist, creating")
        except Exception as e:
            if self.strict_fetch:
                raise
            print(f"[oracle] failed to fetch {self.oracle} ({e}), "
                  "assuming it does not exist", file=sys.stderr)
        else:
            print(f"[oracle] already exists: {account}")
            self.initialized = True
            return None

        tx = await self.program.rpc["create_oracle"](
            ctx=Context(accounts=self.get_accounts()),
        )
        await self.confirm(tx)
        self.initialized = True

        print(f"[created, time={get_time()}] tx={tx}")
        return tx

    async def crank(self):
        r"""Send one crank transaction.

        Returns
        --
        signature of the crank transaction, or None if it failed
        """
        cur_time = get_time()
        print(f"[crank, time={cur_time}] "
              f"transfer={expected_transfer_validation(cur_time)}, "
              f"reward_window={is_within_reward_window(cur_time)}")

        try:
            tx = await self.program.rpc["crank_oracle"](
                ctx=Context(accounts=self.get_accounts()),
            )
            await self.confirm(tx)
        except Exception as e:
            print(f"[error, time={get_time()}] failed to crank oracle: {e}",
                  file=sys.stderr)
            return None

        print(f"[cranked, time={get_time()}] tx={tx}")
        return tx

    async def run_once(self):
        await self.ensure_oracle()
        return await self.crank()

    async def run(self, interval=60, reward_window_only=False):
        """
        Entry point: make sure the Oracle exists, then crank it every
        `interval` seconds. With `reward_window_only`, sleep until the next
        reward window instead of cranking outside of one.
        """
        if not self.initialized:
            await self.ensure_oracle()

        while True:
            if reward_window_only:
                wait = seconds_until_reward_window(get_time())
                if wait > 0:
                    print(f"[sleep, time={get_time()}] "
                          f"next reward window in {wait}s")
                    await asyncio.sleep(wait)
                    continue

            await self.crank()
            await asyncio.sleep(interval)
