from __future__ import annotations

import base64

import pytest

from proxyspec.config import Settings
from proxyspec.core.builder import build_config_from_cmd
from proxyspec.exceptions import (
    InvalidAuthError,
    InvalidNodeError,
    InvalidSpecError,
    ProxySpecError,
    SchemeError,
    URLParseError,
)

REFERENCES = {
    "bypass": "bypasses",
    "resolver": "resolvers",
    "hosts": "hosts",
    "limiter": "limiters",
    "admission": "admissions",
}


def assert_references_resolve(cfg):
    chain_names = {c.name for c in cfg.chains}
    for service in cfg.services:
        for field, collection in REFERENCES.items():
            ref = getattr(service, field)
            if ref is not None:
                assert cfg.find(collection, ref) is not None
        for chain in (service.handler.chain, service.listener.chain):
            if chain is not None:
                assert chain in chain_names
    for chain in cfg.chains:
        for hop in chain.hops:
            for field in ("bypass", "resolver", "hosts"):
                ref = getattr(hop, field)
                if ref is not None:
                    assert cfg.find(REFERENCES[field], ref) is not None


def test_single_service(settings):
    cfg = build_config_from_cmd(
        ["socks5+tls://user:pass@:1080?bypass=1.2.3.0/24&limiter.rate.in=1mb"],
        settings=settings,
    )
    assert cfg.chains == []
    service = cfg.services[0]
    assert service.name == "service-0"
    assert (service.handler.type, service.listener.type) == ("socks5", "tls")
    assert service.handler.chain is None
    assert service.bypass == "bypass-0"
    assert service.limiter == "limiter-0"
    assert cfg.limiters[0].rate.limits == ["$ 1mb"]
    assert service.handler.metadata == {}
    assert service.listener.metadata == {}
    assert service.metadata == {}
    assert_references_resolve(cfg)


def test_chain_from_nodes(settings):
    cfg = build_config_from_cmd(
        ["http://:8080"],
        [
            "socks5://1.1.1.1:1080,2.2.2.2:1080?bypass=~example.com"
            "&so_mark=100&interface=eth0&strategy=fifo&keepalive=true",
            "relay+tls://proxy.example:443?resolver=1.1.1.1&hosts=a.local:10.0.0.1",
        ],
        settings=settings,
    )
    chain = cfg.chains[0]
    assert chain.name == "chain-0"
    assert [h.name for h in chain.hops] == ["hop-0", "hop-1"]

    first, second = chain.hops
    assert [n.name for n in first.nodes] == ["node-0", "node-1"]
    assert [n.addr for n in first.nodes] == ["1.1.1.1:1080", "2.2.2.2:1080"]
    assert first.bypass == "bypass-0"
    assert cfg.bypasses[0].whitelist is True
    assert first.interface == "eth0"
    assert first.sockopts.mark == 100
    assert first.selector.strategy == "fifo"
    for node in first.nodes:
        assert node.connector.metadata == {"keepalive": "true"}
        assert node.dialer.metadata == {"keepalive": "true"}

    assert second.nodes[0].name == "node-0"
    assert second.nodes[0].dialer.tls is None
    assert second.resolver == "resolver-0"
    assert second.hosts == "hosts-0"
    assert second.selector is None
    assert second.nodes[0].connector.metadata == {}

    assert cfg.services[0].handler.chain == "chain-0"
    assert cfg.services[0].listener.chain is None
    assert_references_resolve(cfg)


@pytest.mark.parametrize("scheme", ["rtcp", "rudp"])
def test_reverse_listener_takes_chain(settings, scheme):
    cfg = build_config_from_cmd(
        [f"{scheme}://:8080/192.168.1.1:80"], ["socks5://gw:1080"], settings=settings
    )
    service = cfg.services[0]
    assert service.listener.chain == "chain-0"
    assert service.handler.chain is None


def test_names_are_shared_between_hops_and_services(settings):
    cfg = build_config_from_cmd(
        ["http://:8080?bypass=10.0.0.0/8", "socks5://:1080?bypass=~internal"],
        ["http://gw:3128?bypass=example.com"],
        settings=settings,
    )
    assert cfg.chains[0].hops[0].bypass == "bypass-0"
    assert [s.bypass for s in cfg.services] == ["bypass-1", "bypass-2"]
    assert [s.name for s in cfg.services] == ["service-0", "service-1"]
    assert_references_resolve(cfg)


def test_service_policies(settings):
    cfg = build_config_from_cmd(
        [
            "http://:8080?admission=~127.0.0.1&resolver=1.1.1.1,8.8.8.8&prefer=ipv4"
            "&hosts=a.local:10.0.0.1,b.local:10.0.0.2&retries=3"
            "&limiter.rate.conn.in=100kb&limiter.rate.conn.out=50kb&custom=1"
        ],
        settings=settings,
    )
    service = cfg.services[0]
    assert service.admission == "admission-0"
    assert cfg.admissions[0].whitelist is True
    assert service.resolver == "resolver-0"
    assert [ns.prefer for ns in cfg.resolvers[0].nameservers] == ["ipv4", "ipv4"]
    assert len(cfg.hosts[0].mappings) == 2
    assert service.handler.retries == 3
    assert cfg.limiters[0].rate.limits == ["$$ 100kb 50kb"]
    assert service.handler.metadata == {"custom": "1"}
    assert service.listener.metadata == {"custom": "1"}
    assert service.metadata == {"custom": "1"}
    assert_references_resolve(cfg)


def test_unconsumed_keys_survive(settings):
    cfg = build_config_from_cmd(
        ["socks5://:1080?notls=true&udpBufferSize=4096"],
        ["socks5+ws://gw:80?path=/ws&host=cdn.example"],
        settings=settings,
    )
    assert cfg.services[0].handler.metadata == {"notls": "true", "udpBufferSize": "4096"}
    node = cfg.chains[0].hops[0].nodes[0]
    assert node.dialer.metadata == {"path": "/ws", "host": "cdn.example"}


def test_auth_precedence(settings):
    encoded = base64.b64encode(b"other:pw").decode()
    cfg = build_config_from_cmd([f"http://user:pass@:8080?auth={encoded}"], settings=settings)
    auth = cfg.services[0].handler.auth
    assert (auth.username, auth.password) == ("other", "pw")


def test_injected_registry(fake_registry, settings):
    cfg = build_config_from_cmd(
        ["kcp://:8080"], ["quic://gw:443"], registry=fake_registry, settings=settings
    )
    service = cfg.services[0]
    assert (service.handler.type, service.listener.type) == ("auto", "tcp")
    node = cfg.chains[0].hops[0].nodes[0]
    assert (node.connector.type, node.dialer.type) == ("http", "tcp")


def test_environment_sections():
    settings = Settings(
        profiling=":6060", metrics=":9000", logger_level="debug", api=":18080"
    )
    cfg = build_config_from_cmd([":8080"], settings=settings)
    assert cfg.profiling.addr == ":6060"
    assert cfg.metrics.addr == ":9000"
    assert cfg.log.level == "debug"
    assert cfg.api.addr == ":18080"


def test_environment_read_when_settings_omitted(monkeypatch):
    monkeypatch.setenv("GOST_METRICS", ":9100")
    monkeypatch.setenv("GOST_API", "")
    cfg = build_config_from_cmd([":8080"])
    assert cfg.metrics.addr == ":9100"
    assert cfg.api is None
    assert cfg.profiling is None


@pytest.mark.parametrize(
    "services, nodes, error",
    [
        (["  "], [], InvalidSpecError),
        ([":8080"], [""], InvalidSpecError),
        (["http://:8080?auth=%21%21"], [], InvalidAuthError),
        ([":8080", "http://[::1"], [], URLParseError),
        ([":8080"], ["http://,"], InvalidNodeError),
        (["a+b+c://:80"], [], URLParseError),
    ],
)
def test_errors_abort_compilation(settings, services, nodes, error):
    with pytest.raises(error) as exc_info:
        build_config_from_cmd(services, nodes, settings=settings)
    assert isinstance(exc_info.value, ProxySpecError)


@pytest.mark.parametrize(
    "services, nodes, spec",
    [
        (["  "], [], "  "),
        (["http://:8080?auth=%21%21"], [], "http://:8080?auth=%21%21"),
        (["a+b+c://:80"], [], "a+b+c://:80"),
        ([":8080", "http://[::1"], [], "http://[::1"),
        ([":8080"], ["http://,"], "http://,"),
    ],
)
def test_errors_name_the_spec(settings, services, nodes, spec):
    with pytest.raises(ProxySpecError) as exc_info:
        build_config_from_cmd(services, nodes, settings=settings)
    assert spec in str(exc_info.value)


def test_errors_keep_their_type(settings):
    with pytest.raises(SchemeError) as exc_info:
        build_config_from_cmd(["a+b+c://:80"], settings=settings)
    assert isinstance(exc_info.value.__cause__, SchemeError)
