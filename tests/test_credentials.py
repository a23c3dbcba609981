import pytest

from tulip_edge.config import Settings
from tulip_edge.credentials.models import ApiAuth
from tulip_edge.credentials.service import CredentialStore, build_api_auth
from tulip_edge.errors import ConfigurationError


@pytest.fixture
def defaults():
    return Settings(
        _env_file=None,
        HOSTNAME="default.tulip.co",
        API_KEY="apikey.2_default",
        API_SECRET="default-secret",
    )


def test_basic_auth_pair(auth):
    assert auth.basic_auth == ("apikey.2_abc123", "s3cr3t")
    assert "s3cr3t" not in repr(auth)


def test_empty_port_is_unset():
    auth = ApiAuth(hostname="acme.tulip.co", port="", apiKey="k", apiSecret="s")
    assert auth.port is None
    assert auth.protocol == "https"


def test_build_api_auth_fills_defaults(defaults):
    auth = build_api_auth({"hostname": "acme.tulip.co", "apiKey": "", "port": 8443}, defaults)

    assert auth.hostname == "acme.tulip.co"
    assert auth.port == 8443
    assert auth.basic_auth == ("apikey.2_default", "default-secret")


def test_build_api_auth_invalid_protocol(defaults):
    with pytest.raises(ConfigurationError, match="Invalid api-auth configuration"):
        build_api_auth({"protocol": "ftp"}, defaults)


def test_build_api_auth_missing_hostname():
    with pytest.raises(ConfigurationError):
        build_api_auth({"apiKey": "k", "apiSecret": "s"}, Settings(_env_file=None))


def test_store_register_and_get(auth):
    store = CredentialStore()
    store.register("factory-a", auth)
    registered = store.register(
        "factory-b", {"hostname": "b.tulip.co", "apiKey": "k", "apiSecret": "s"}
    )

    assert store.get("factory-a") is auth
    assert store.get("factory-b") is registered
    assert registered.hostname == "b.tulip.co"


def test_store_unknown_id(auth):
    store = CredentialStore()
    store.register("factory-a", auth)
    store.unregister("factory-a")

    with pytest.raises(ConfigurationError, match="Unknown api-auth 'factory-a'"):
        store.get("factory-a")


@pytest.mark.asyncio
async def test_node_resolves_registered_auth(auth, make_transport, basic_auth_header):
    from tulip_edge.credentials.service import credential_store
    from tulip_edge.engine.nodes.registry import NodeRegistry

    credential_store.register("factory-a", auth)
    transport = make_transport(json_body={})
    try:
        node = await NodeRegistry.create_node(
            "tulip.links", {"linkId": "L1", "apiAuth": "factory-a"}, transport=transport
        )
        async with node:
            await node.receive({})
    finally:
        credential_store.unregister("factory-a")

    assert node.auth is auth
    assert transport.requests[0].headers["authorization"] == basic_auth_header
