from __future__ import annotations

import pytest

from proxyspec.core.normalizer import normalize_spec, split_scheme
from proxyspec.exceptions import InvalidSpecError, SchemeError, URLParseError


def test_normalize_full_spec():
    url = normalize_spec(
        "socks5+tls://user:pass@:1080?bypass=1.2.3.0/24&limiter.rate.in=1mb"
    )
    assert url.scheme == "socks5+tls"
    assert url.username == "user"
    assert url.password == "pass"
    assert url.host == ":1080"
    assert url.query == {"bypass": "1.2.3.0/24", "limiter.rate.in": "1mb"}


@pytest.mark.parametrize(
    "spec, host",
    [
        (":8080", ":8080"),
        ("example.com:8080", "example.com:8080"),
        ("  :1080  ", ":1080"),
    ],
)
def test_bare_address_gets_auto_scheme(spec, host):
    url = normalize_spec(spec)
    assert url.scheme == "auto"
    assert url.host == host


def test_https_is_http_over_tls():
    url = normalize_spec("https://example.com/path")
    assert url.scheme == "http+tls"
    assert url == normalize_spec("http+tls://example.com/path")


@pytest.mark.parametrize(
    "spec",
    [
        ":8080",
        "socks5://user:pass@:1080?bypass=~10.0.0.0/8",
        "https://host/path",
        "tcp://:8080/192.168.1.1:80,192.168.1.2:80",
        "user@host:22",
    ],
)
def test_normalize_is_idempotent(spec):
    url = normalize_spec(spec)
    again = normalize_spec(url.geturl())
    assert again == url
    assert not again.geturl().startswith("auto://auto")


@pytest.mark.parametrize("spec", ["", "   ", "\t\n", None])
def test_empty_spec_is_invalid(spec):
    with pytest.raises(InvalidSpecError):
        normalize_spec(spec)


@pytest.mark.parametrize("spec", ["http://[::1", "http://host:abc", "tcp://:80x"])
def test_malformed_url(spec):
    with pytest.raises(URLParseError):
        normalize_spec(spec)


def test_first_query_value_wins():
    assert normalize_spec("tcp://:80?a=1&a=2&b=").query == {"a": "1", "b": ""}


def test_userinfo_without_password():
    url = normalize_spec("ssh://admin@host:22")
    assert url.has_userinfo
    assert url.username == "admin"
    assert url.password is None
    assert not normalize_spec("ssh://host:22").has_userinfo


@pytest.mark.parametrize(
    "spec, hostname",
    [
        ("tls://example.com:443", "example.com"),
        ("tls://[::1]:443", "::1"),
        ("tls://example.com", "example.com"),
        (":443", ""),
    ],
)
def test_hostname(spec, hostname):
    assert normalize_spec(spec).hostname == hostname


@pytest.mark.parametrize(
    "scheme, expected",
    [
        ("socks5", ("socks5", "socks5")),
        ("socks5+tls", ("socks5", "tls")),
        ("http+", ("http", "")),
    ],
)
def test_split_scheme(scheme, expected):
    assert split_scheme(scheme) == expected


def test_split_scheme_rejects_three_segments():
    with pytest.raises(SchemeError):
        split_scheme("relay+tls+ws")
    with pytest.raises(URLParseError):
        split_scheme("a+b+c")


def test_ipv6_host_list():
    url = normalize_spec("http://[::1]:80,[::2]:80")
    assert url.host == "[::1]:80,[::2]:80"
