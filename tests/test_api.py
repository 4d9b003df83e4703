from unittest.mock import MagicMock, patch

import requests

from cranker.api import SolanaRPC

URL = "http://127.0.0.1:8899"


def fake_post(results, ok=True):
    r"""requests.post replacement answering by JSON-RPC method name.

    `results` maps a method to its `result`, or to a full response body
    when the value is a dict holding an "error".
    """
    def post(url, json=None, timeout=None):
        answer = results.get(json["method"])
        body = answer if isinstance(answer, dict) and "error" in answer \
            else {"jsonrpc": "2.0", "id": 1, "result": answer}

        response = MagicMock()
        response.ok = ok
        response.json.return_value = body
        return response
    return MagicMock(side_effect=post)


def test_healthy_node():
    post = fake_post({"getHealth": "ok"})
    with patch("cranker.api.requests.post", post):
        assert SolanaRPC(URL).check_connection()

    assert post.call_args.args[0] == URL
    assert post.call_args.kwargs["json"]["method"] == "getHealth"


def test_constructing_client_sends_nothing():
    post = MagicMock()
    with patch("cranker.api.requests.post", post):
        SolanaRPC(URL)
    post.assert_not_called()


def test_node_behind_is_unhealthy():
    behind = {"jsonrpc": "2.0", "id": 1,
              "error": {"code": -32005, "message": "Node is behind by 42 slots"}}
    with patch("cranker.api.requests.post", fake_post({"getHealth": behind})):
        assert not SolanaRPC(URL).check_connection()


def test_unreachable_node_is_unhealthy():
    post = MagicMock(side_effect=requests.ConnectionError("refused"))
    with patch("cranker.api.requests.post", post):
        rpc = SolanaRPC(URL)
        assert not rpc.check_connection()
        assert rpc.get_slot() is None


def test_get_slot():
    with patch("cranker.api.requests.post", fake_post({"getSlot": 42})):
        assert SolanaRPC(URL).get_slot() == 42


def test_http_error_returns_none():
    with patch("cranker.api.requests.post", fake_post({"getSlot": 42}, ok=False)):
        assert SolanaRPC(URL).get_slot() is None
