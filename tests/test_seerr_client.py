from __future__ import annotations

import json
import socket

import pytest
import requests
import responses

from syncer.seerr_client import (
    ConfigurationError,
    HTTPError,
    ResponseMode,
    SeerrClient,
    SeerrDecodeError,
    SeerrEncodeError,
    SeerrError,
    SeerrRequestError,
    TransportConfig,
)

BLOCKLIST_URL = "http://seerr.local:5055/api/v1/blocklist"


@pytest.mark.parametrize(
    "host, expected",
    [
        ("http://seerr.local:5055", BLOCKLIST_URL),
        ("http://seerr.local:5055/", BLOCKLIST_URL),
        ("https://example.com/seerr/", "https://example.com/seerr/api/v1/blocklist"),
    ],
)
def test_base_url_is_bound_to_endpoint(host: str, expected: str) -> None:
    with SeerrClient(host, "key", "blocklist") as c:
        assert c.base_url == expected


@pytest.mark.parametrize("host", ["", "localhost", "seerr.local:5055", "http://", "/api"])
def test_host_without_scheme_or_host_is_rejected(host: str) -> None:
    with pytest.raises(ConfigurationError):
        SeerrClient(host, "key", "blocklist")


def test_configuration_error_is_a_seerr_error() -> None:
    assert issubclass(ConfigurationError, SeerrError)
    assert issubclass(HTTPError, SeerrError)


def test_session_ignores_proxies_and_sends_api_key(client: SeerrClient) -> None:
    assert client.session.trust_env is False
    assert client.session.headers["X-Api-Key"] == "secret-key"
    assert client.session.headers["Connection"] == "keep-alive"


def test_transport_defaults() -> None:
    transport = TransportConfig()
    assert transport.timeout == (30.0, 10.0)
    assert transport.keepalive_idle == 60.0
    assert (socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1) in transport.socket_options()


def test_url_for_appends_endpoint_and_query(client: SeerrClient) -> None:
    assert client.url_for() == BLOCKLIST_URL
    assert client.url_for("/400") == f"{BLOCKLIST_URL}/400"
    assert (
        client.url_for("", {"take": 5, "skip": 10, "filter": "all"})
        == f"{BLOCKLIST_URL}?take=5&skip=10&filter=all"
    )


def test_get_decodes_json(client: SeerrClient) -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, BLOCKLIST_URL, json={"results": [], "pageInfo": {"pages": 0}})

        data = client.get()

        assert data == {"results": [], "pageInfo": {"pages": 0}}
        req = rsps.calls[0].request
        assert req.headers["X-Api-Key"] == "secret-key"
        assert req.headers["Accept"] == "application/json"


def test_get_text_returns_body_verbatim(client: SeerrClient) -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, BLOCKLIST_URL, body="<html>not json</html>", status=200)

        assert client.get(response=ResponseMode.TEXT) == "<html>not json</html>"


def test_get_invalid_json_raises_decode_error(client: SeerrClient) -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, BLOCKLIST_URL, body="{oops", status=200)

        with pytest.raises(SeerrDecodeError) as exc:
            client.get()
        assert BLOCKLIST_URL in str(exc.value)


def test_post_sends_unescaped_json(client: SeerrClient) -> None:
    payload = {"mediaType": "tv", "tmdbId": 30991, "title": "Re:Zero & <Friends> ü", "user": 7}
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, BLOCKLIST_URL, status=201)

        assert client.post("", payload=payload) is None

        req = rsps.calls[0].request
        assert req.headers["Content-Type"] == "application/json"
        assert req.headers.get("Accept") != "application/json"
        body = req.body.decode("utf-8")
        assert "Re:Zero & <Friends> ü" in body
        assert json.loads(body) == payload


def test_put_sends_payload_and_decodes(client: SeerrClient) -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(responses.PUT, f"{BLOCKLIST_URL}/1", json={"ok": True})

        assert client.put("/1", payload={"a": 1}, response=ResponseMode.JSON) == {"ok": True}
        assert json.loads(rsps.calls[0].request.body) == {"a": 1}


def test_delete_hits_id_endpoint(client: SeerrClient) -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(responses.DELETE, f"{BLOCKLIST_URL}/400", status=204)

        assert client.delete("/400") is None
        assert rsps.calls[0].request.body is None


def test_non_2xx_raises_http_error_without_body(client: SeerrClient) -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, BLOCKLIST_URL, json={"message": "exists"}, status=412)

        with pytest.raises(HTTPError) as exc:
            client.post("", payload={"tmdbId": 1})

    err = exc.value
    assert err.status_code == 412
    assert err.status.startswith("412")
    assert err.method == "POST"
    assert err.url == BLOCKLIST_URL
    assert "exists" not in str(err)
    assert str(err).startswith(f"failed to POST {BLOCKLIST_URL}: 412")


def test_http_error_url_includes_query(client: SeerrClient) -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, BLOCKLIST_URL, status=500)

        with pytest.raises(HTTPError) as exc:
            client.get("", {"take": 1, "skip": 0})

    assert exc.value.url == f"{BLOCKLIST_URL}?take=1&skip=0"


def test_redirect_status_is_not_success(client: SeerrClient) -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(responses.DELETE, f"{BLOCKLIST_URL}/1", status=304)

        with pytest.raises(HTTPError):
            client.delete("/1")


def test_transport_failure_is_wrapped(client: SeerrClient) -> None:
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, BLOCKLIST_URL, body=requests.ConnectionError("refused"))

        with pytest.raises(SeerrRequestError) as exc:
            client.get()
        assert isinstance(exc.value.__cause__, requests.ConnectionError)


def test_unserialisable_payload_raises_before_sending(client: SeerrClient) -> None:
    with responses.RequestsMock() as rsps:
        with pytest.raises(SeerrEncodeError):
            client.post("", payload={"when": object()})
        assert len(rsps.calls) == 0


def test_get_text_keeps_utf8_without_charset(client: SeerrClient) -> None:
    title = "Shingeki no Kyojin – 進撃の巨人"
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, BLOCKLIST_URL, body=title.encode("utf-8"), content_type="text/plain")

        assert client.get(response=ResponseMode.TEXT) == title
