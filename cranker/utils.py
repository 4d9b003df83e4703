import json
import time
from os.path import expanduser

from solders.keypair import Keypair


def get_time():
    """Get current time in unix"""
    return int(time.time())


def from_json(path):
    with open(path) as fp:
        result = json.load(fp)
    return result


def load_keypair(path):
    r"""Load a keypair from a solana-keygen JSON file (64 byte array)."""
    secret = from_json(expanduser(path))
    assert len(secret) == 64, f"Expected 64 byte secret key in {path}"
    return Keypair.from_bytes(bytes(secret))
