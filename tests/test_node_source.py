from __future__ import annotations

import httpx
import pytest
from botocore.credentials import Credentials

from pgc_ansible_inventory.config import Settings
from pgc_ansible_inventory.exceptions import ConfigurationError, NodeSourceError
from pgc_ansible_inventory.source.client import InventoryApiClient, SigV4Auth

BASE_URL = "https://inventory.example.org/v1"


def _client(handler, **kwargs) -> InventoryApiClient:
    return InventoryApiClient(BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


def test_fetch_all_decodes_nodes_in_order() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert str(request.url) == f"{BASE_URL}/nodeconfig"
        return httpx.Response(200, json=[{"Hostname": "b"}, {"Hostname": "a", "Tags": None}])

    nodes = _client(handler).fetch_all()

    assert [node.hostname for node in nodes] == ["b", "a"]


def test_null_body_is_empty_inventory() -> None:
    assert _client(lambda request: httpx.Response(200, content=b"null")).fetch_all() == []


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="boom"),
        httpx.Response(403, json={"message": "forbidden"}),
        httpx.Response(200, content=b"not json"),
        httpx.Response(200, json=[{"Networks": "bogus"}]),
        httpx.Response(200, json={"Hostname": "not-a-list"}),
    ],
)
def test_fetch_failures_raise_node_source_error(response: httpx.Response) -> None:
    with pytest.raises(NodeSourceError):
        _client(lambda request: response).fetch_all()


def test_transport_error_raises_node_source_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NodeSourceError):
        _client(handler).fetch_all()


def test_requests_are_signed() -> None:
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.headers)
        return httpx.Response(200, json=[])

    auth = SigV4Auth(Credentials("AKIDEXAMPLE", "secret"), "us-east-2")
    _client(handler, auth=auth).fetch_all()

    assert seen["authorization"].startswith("AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/")
    assert "/us-east-2/execute-api/aws4_request" in seen["authorization"]
    assert "x-amz-date" in seen


def test_from_settings_requires_base_url(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ConfigurationError):
        InventoryApiClient.from_settings(Settings())


def test_unknown_profile_is_a_configuration_error(tmp_path, monkeypatch) -> None:
    for name in ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_SESSION_TOKEN", "AWS_PROFILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "credentials"))
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")

    with pytest.raises(ConfigurationError):
        SigV4Auth.from_profile("does-not-exist", "us-east-2")
