"""
Program-derived addresses used by the market hours program.
"""
from solders.pubkey import Pubkey

ORACLE_SEED = b"oracle"
REWARD_VAULT_SEED = b"reward_vault"


def derive_oracle_address(program_id: Pubkey):
    r"""Address of the global Oracle account.

    Returns
    --
    (address, bump)
    """
    return Pubkey.find_program_address([ORACLE_SEED], program_id)


def derive_reward_vault_address(oracle: Pubkey, program_id: Pubkey):
    r"""Address of the system account holding crank rewards for `oracle`.

    Returns
    --
    (address, bump)
    """
    return Pubkey.find_program_address([REWARD_VAULT_SEED, bytes(oracle)],
                                       program_id)
