import pytest

from kns_sdk.config import DEFAULT_EXCHANGE_RATE_TTL, KnsConfig
from kns_sdk.version import __version__


def test_presets():
    testnet = KnsConfig()
    assert testnet.network == "testnet"
    assert testnet.resolver_url == "https://ns.testnet.kabuto.sh/api"
    assert testnet.mirror_url == "https://testnet.mirrornode.hedera.com"

    mainnet = KnsConfig.for_network("mainnet")
    assert mainnet.resolver_url == "https://ns.kabuto.sh/api"
    assert mainnet.mirror_url == "https://mainnet-public.mirrornode.hedera.com"
    assert mainnet.exchange_rate_ttl == DEFAULT_EXCHANGE_RATE_TTL == 600


def test_from_env(monkeypatch):
    monkeypatch.setenv("KNS_NETWORK", "MAINNET")
    monkeypatch.setenv("KNS_RESOLVER_URL", "http://localhost:8080/api")
    monkeypatch.setenv("KNS_TIMEOUT", "5")
    monkeypatch.setenv("KNS_EXCHANGE_RATE_TTL", "60")
    monkeypatch.delenv("KNS_MIRROR_URL", raising=False)
    monkeypatch.delenv("KNS_USER_AGENT", raising=False)

    cfg = KnsConfig.from_env()
    assert cfg.network == "mainnet"
    assert cfg.resolver_url == "http://localhost:8080/api"
    assert cfg.mirror_url == "https://mainnet-public.mirrornode.hedera.com"
    assert cfg.request_timeout == 5.0
    assert cfg.exchange_rate_ttl == 60.0
    assert cfg.user_agent == f"kns-sdk-py/{__version__}"


def test_from_env_custom_prefix(monkeypatch):
    monkeypatch.setenv("MYAPP_NETWORK", "mainnet")
    assert KnsConfig.from_env(prefix="MYAPP_").network == "mainnet"


def test_invalid_values():
    with pytest.raises(ValueError):
        KnsConfig(network="previewnet")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        KnsConfig(resolver_url="ftp://example.com")


def test_with_overrides_rederives_urls():
    base = KnsConfig(network="testnet", request_timeout=3)
    cfg = KnsConfig.with_overrides(base, network="mainnet", bogus=1)
    assert cfg.resolver_url == "https://ns.kabuto.sh/api"
    assert cfg.request_timeout == 3.0

    pinned = KnsConfig.with_overrides(base, network="mainnet", resolver_url="http://r.test")
    assert pinned.resolver_url == "http://r.test"
    assert pinned.mirror_url == "https://mainnet-public.mirrornode.hedera.com"


def test_headers_and_dict():
    cfg = KnsConfig(user_agent="kns-test/1")
    assert cfg.http_headers() == {"Accept": "application/json", "User-Agent": "kns-test/1"}
    assert KnsConfig(**cfg.to_dict()) == cfg
