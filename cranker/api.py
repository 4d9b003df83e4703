"""
Read-only queries against a Solana JSON-RPC node.
"""
import requests


class BaseRPC:
    r"""Base class of JSON-RPC client to inherit from."""

    def get_base_url(self):
        # RPC node url
        raise NotImplementedError

    @staticmethod
    def get_payload(method, params=None):
        return {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params or [],
        }

    def parse_response(self, r):
        # Fetch result from successful response
        if 'result' in r:
            return r['result']
        return None

    def check_connection(self):
        # Check connection with node
        # By default, this does not check liveness
        return True

    def call(self, method, params=None):
        r = requests.post(self.get_base_url(),
                          json=self.get_payload(method, params),
                          timeout=10,
                          )
        if r.ok:
            return self.parse_response(r.json())

        return None


class SolanaRPC(BaseRPC):
    r"""Query a Solana cluster over HTTP."""

    def __init__(self, url):
        self.url = url

    def get_base_url(self):
        return self.url

    def check_connection(self):
        # A node that is behind answers getHealth with an error
        try:
            return self.call("getHealth") == "ok"
        except requests.RequestException:
            return False

    def get_slot(self):
        try:
            return self.call("getSlot")
        except requests.RequestException:
            return None
