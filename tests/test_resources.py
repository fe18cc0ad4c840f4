from __future__ import annotations

from proxyspec.core.metadata import Metadata
from proxyspec.core.resources import (
    HOP_RULES,
    SERVICE_RULES,
    attach_resources,
    split_list,
)
from proxyspec.models import Config, HopConfig, ServiceConfig


def test_split_list_drops_empty_items():
    assert split_list("a,,b,") == ["a", "b"]
    assert split_list("") == []


def test_bypass_whitelist():
    cfg = Config()
    service = ServiceConfig(name="service-0")
    data = {"bypass": "~1.2.3.0/24,10.0.0.0/8", "foo": "bar"}
    attach_resources(cfg, service, Metadata(data), SERVICE_RULES)

    assert service.bypass == "bypass-0"
    bypass = cfg.bypasses[0]
    assert bypass.name == "bypass-0"
    assert bypass.whitelist is True
    assert bypass.matchers == ["1.2.3.0/24", "10.0.0.0/8"]
    assert data == {"foo": "bar"}


def test_blacklist_admission():
    cfg = Config()
    service = ServiceConfig()
    attach_resources(cfg, service, Metadata({"admission": "127.0.0.1,::1"}), SERVICE_RULES)
    assert service.admission == "admission-0"
    assert cfg.admissions[0].whitelist is False
    assert cfg.admissions[0].matchers == ["127.0.0.1", "::1"]


def test_names_follow_collection_size():
    cfg = Config()
    first, second = HopConfig(name="hop-0"), ServiceConfig()
    attach_resources(cfg, first, Metadata({"bypass": "a.com"}), HOP_RULES)
    attach_resources(cfg, second, Metadata({"bypass": "b.com"}), SERVICE_RULES)
    assert first.bypass == "bypass-0"
    assert second.bypass == "bypass-1"
    assert [b.name for b in cfg.bypasses] == ["bypass-0", "bypass-1"]


def test_hosts_drops_malformed_mappings():
    cfg = Config()
    hop = HopConfig(name="hop-0")
    data = {"hosts": "example.com:1.2.3.4,bad,foo.local:::1"}
    attach_resources(cfg, hop, Metadata(data), HOP_RULES)

    mappings = cfg.hosts[0].mappings
    assert [(m.hostname, m.ip) for m in mappings] == [
        ("example.com", "1.2.3.4"),
        ("foo.local", "::1"),
    ]
    assert hop.hosts == "hosts-0"
    assert data == {}


def test_service_resolver_attaches_prefer():
    cfg = Config()
    service = ServiceConfig()
    data = {"resolver": "1.1.1.1,udp://8.8.8.8:53", "prefer": "ipv6"}
    attach_resources(cfg, service, Metadata(data), SERVICE_RULES)

    nameservers = cfg.resolvers[0].nameservers
    assert [ns.addr for ns in nameservers] == ["1.1.1.1", "udp://8.8.8.8:53"]
    assert all(ns.prefer == "ipv6" for ns in nameservers)
    assert service.resolver == "resolver-0"
    assert data == {}


def test_hop_resolver_ignores_prefer():
    cfg = Config()
    hop = HopConfig(name="hop-0")
    data = {"resolver": "1.1.1.1", "prefer": "ipv4"}
    attach_resources(cfg, hop, Metadata(data), HOP_RULES)
    assert cfg.resolvers[0].nameservers[0].prefer is None
    assert data == {"prefer": "ipv4"}


def test_limiter_rules():
    cfg = Config()
    service = ServiceConfig()
    data = {
        "limiter.rate.in": "1mb",
        "limiter.rate.out": "2mb",
        "limiter.rate.conn.in": "100kb",
    }
    attach_resources(cfg, service, Metadata(data), SERVICE_RULES)
    assert service.limiter == "limiter-0"
    assert cfg.limiters[0].rate.limits == ["$ 1mb 2mb", "$$ 100kb"]
    assert data == {}


def test_limiter_needs_inbound_rate():
    cfg = Config()
    service = ServiceConfig()
    data = {"limiter.rate.out": "2mb"}
    attach_resources(cfg, service, Metadata(data), SERVICE_RULES)
    assert service.limiter is None
    assert cfg.limiters == []
    assert data == {"limiter.rate.out": "2mb"}


def test_absent_or_empty_trigger_creates_nothing():
    cfg = Config()
    service = ServiceConfig()
    attach_resources(cfg, service, Metadata({"bypass": "", "x": "y"}), SERVICE_RULES)
    assert cfg.bypasses == []
    assert service.bypass is None
    assert cfg.resolvers == [] and cfg.hosts == [] and cfg.admissions == []
