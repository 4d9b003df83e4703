from solders.pubkey import Pubkey

from cranker.pda import derive_oracle_address, derive_reward_vault_address

PROGRAM_ID = Pubkey.from_string("32RNH2JPGUCGdYp5TetkT1Y2CHwAUk2XzXn6VCFqvb7F")


def test_oracle_address_uses_oracle_seed():
    expected = Pubkey.find_program_address([b"oracle"], PROGRAM_ID)
    assert derive_oracle_address(PROGRAM_ID) == expected


def test_reward_vault_is_seeded_by_oracle():
    oracle, _ = derive_oracle_address(PROGRAM_ID)
    expected = Pubkey.find_program_address([b"reward_vault", bytes(oracle)],
                                           PROGRAM_ID)
    assert derive_reward_vault_address(oracle, PROGRAM_ID) == expected


def test_addresses_are_deterministic():
    first, _ = derive_oracle_address(PROGRAM_ID)
    second, _ = derive_oracle_address(PROGRAM_ID)
    assert first == second
    assert derive_reward_vault_address(first, PROGRAM_ID) == \
        derive_reward_vault_address(second, PROGRAM_ID)


def test_addresses_depend_on_program():
    other = Pubkey.new_unique()
    assert derive_oracle_address(other)[0] != derive_oracle_address(PROGRAM_ID)[0]


def test_addresses_are_off_curve():
    oracle, _ = derive_oracle_address(PROGRAM_ID)
    vault, _ = derive_reward_vault_address(oracle, PROGRAM_ID)
    assert not oracle.is_on_curve()
    assert not vault.is_on_curve()
