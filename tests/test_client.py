import httpx
import pytest

from pitchscore.backend.client import EvaluationClient
from pitchscore.backend.errors import TransportError


def _client(handler):
    return EvaluationClient("http://backend.test", transport=httpx.MockTransport(handler))


def test_posts_transcript_and_returns_payload():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = request.read()
        return httpx.Response(200, json={"ok": True, "result": {"score": 0.5}})

    payload = _client(handler).evaluate("Hi, I'm Alex...")

    assert payload == {"ok": True, "result": {"score": 0.5}}
    assert seen["method"] == "POST"
    assert seen["path"] == "/api/evaluate"
    assert b"Hi, I'm Alex..." in seen["body"]


def test_failure_payload_is_returned_not_raised():
    body = {"ok": False, "error": "Failed to parse JSON from model.", "modelOutput": "nope"}

    payload = _client(lambda request: httpx.Response(500, json=body)).evaluate("x")

    assert payload == body


def test_connection_error_raises_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError, match="connection refused"):
        _client(handler).evaluate("x")


def test_non_json_response_raises_transport_error():
    handler = lambda request: httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(TransportError, match="502"):
        _client(handler).evaluate("x")


def test_unexpected_json_shape_raises_transport_error():
    handler = lambda request: httpx.Response(404, json={"detail": "Not Found"})

    with pytest.raises(TransportError, match="404"):
        _client(handler).evaluate("x")
