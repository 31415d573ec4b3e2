from types import SimpleNamespace

import pytest
from geoip2.errors import AddressNotFoundError

from geoip_api.dns import ResolutionError
from geoip_api.resolver import GeoIpResolver


def names(**kw):
    return SimpleNamespace(names=kw)


def city_response(city=None, states=(), country=None, iso_code=None):
    return SimpleNamespace(
        city=SimpleNamespace(names=city or {}),
        subdivisions=tuple(SimpleNamespace(names=s) for s in states),
        country=SimpleNamespace(names=country or {}, iso_code=iso_code),
    )


def asn_response(number, org=None):
    return SimpleNamespace(autonomous_system_number=number, autonomous_system_organization=org)


class FakeReader:
    """Same city()/asn() surface as geoip2.database.Reader, backed by a dict."""

    def __init__(self, entries=None, errors=None):
        self.entries = entries or {}
        self.errors = errors or {}
        self.calls = []

    def _get(self, ip):
        self.calls.append(ip)
        if ip in self.errors:
            raise self.errors[ip]
        if ip not in self.entries:
            raise AddressNotFoundError(f"The address {ip} is not in the database.")
        return self.entries[ip]

    city = _get
    asn = _get


class FakeDns:
    def __init__(self, hosts=None, ptrs=None):
        self.hosts = hosts or {}
        self.ptrs = ptrs or {}

    def forward(self, host):
        if host in self.hosts:
            return list(self.hosts[host])
        if host.replace(".", "").isdigit() or ":" in host:
            return [host]
        raise ResolutionError(host, "Name or service not known")

    def reverse(self, ip):
        return self.ptrs.get(ip)


GOOGLE = {
    "8.8.8.8": asn_response(15169, "Google LLC"),
    "2001:4860:4860::8888": asn_response(15169, "Google LLC"),
}

CLOUDFLARE_CITY = city_response(
    city={"en": "Sydney", "de": "Sydney"},
    states=[{"en": "New South Wales"}],
    country={"en": "Australia", "ru": "Австралия"},
    iso_code="AU",
)


@pytest.fixture
def city_reader():
    return FakeReader({"1.1.1.1": CLOUDFLARE_CITY})


@pytest.fixture
def asn_reader():
    return FakeReader(dict(GOOGLE, **{"1.1.1.1": asn_response(13335, "Cloudflare, Inc.")}))


@pytest.fixture
def dns():
    return FakeDns(
        hosts={"dns.google": ["8.8.8.8", "8.8.4.4"], "one.one.one.one": ["1.1.1.1", "1.0.0.1"]},
        ptrs={"8.8.8.8": "dns.google", "1.1.1.1": "one.one.one.one"},
    )


@pytest.fixture
def resolver(city_reader, asn_reader, dns):
    return GeoIpResolver(city_reader, asn_reader, dns)
