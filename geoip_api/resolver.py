import logging
import time
from typing import Any, List, Optional, Sequence

import maxminddb
from geoip2.errors import AddressNotFoundError, GeoIP2Error

from .dns import ResolutionError, SystemDns, same_address
from .models import AsnData, CityData, GeoIpResult, IpData

log = logging.getLogger(__name__)

LOCALE = "en"

# Ошибки самой базы (не промах): битая запись, не тот тип базы и т.п.
DATASET_ERRORS = (GeoIP2Error, maxminddb.InvalidDatabaseError, ValueError, TypeError)


def _localized(record: Any, what: str, ip: str) -> Optional[str]:
    names = getattr(record, "names", None) if record is not None else None
    if not names:
        log.error("No %s found for IP: %s", what, ip)
        return None
    name = names.get(LOCALE)
    if name is None:
        log.error("No '%s' name for %s of IP: %s (have: %s)", LOCALE, what, ip, ", ".join(sorted(names)))
    return name


def city_record(response: Any, ip: str) -> Optional[CityData]:
    subdivisions = list(getattr(response, "subdivisions", None) or [])
    country = getattr(response, "country", None)

    iso_code = getattr(country, "iso_code", None) if country is not None else None
    if iso_code is None:
        log.error("No Country ISO code found for IP: %s", ip)

    rec = CityData(
        name=_localized(getattr(response, "city", None), "City", ip),
        # только первая subdivision считается "штатом"
        state=_localized(subdivisions[0] if subdivisions else None, "State", ip),
        country=_localized(country, "Country", ip),
        country_iso_code=iso_code,
    )
    return None if rec.is_empty() else rec


def asn_record(response: Any) -> Optional[AsnData]:
    number = response.autonomous_system_number
    rec = AsnData(
        number=f"AS{number}" if number is not None else None,
        name=response.autonomous_system_organization,
    )
    return None if rec.is_empty() else rec


class GeoIpResolver:
    """Resolves host identifiers into GeoIpResult records.

    ``city_reader`` and ``asn_reader`` are opened ``geoip2.database.Reader``
    objects (or anything with the same ``city()`` / ``asn()`` methods);
    they are only read from, so one resolver can serve concurrent requests.
    """

    def __init__(self, city_reader, asn_reader, dns: Optional[SystemDns] = None):
        self.city_reader = city_reader
        self.asn_reader = asn_reader
        self.dns = dns or SystemDns()

    def _lookup(self, kind: str, method, ip: str):
        try:
            return method(ip)
        except AddressNotFoundError:
            log.info("No %s entry for IP: %s", kind, ip)
        except DATASET_ERRORS as e:
            log.error("An error happened while searching %s for IP: %s, %s", kind, ip, e)
        return None

    def resolve(self, identifier: str) -> GeoIpResult:
        started = time.perf_counter()
        log.info("Geolocating IP %s", identifier)

        addrs = self.dns.forward(identifier)
        if not addrs:
            raise ResolutionError(identifier)
        ip = addrs[0]
        if ip != identifier:
            log.info("Resolved DNS %s to IP %s", identifier, ip)

        ptr = self.dns.reverse(ip)
        if ptr is not None and same_address(ptr, ip):
            ptr = None

        city = self._lookup("City", self.city_reader.city, ip)
        asn = self._lookup("ASN", self.asn_reader.asn, ip)

        result = GeoIpResult(
            ip=IpData(ip=ip, ptr=ptr),
            city=city_record(city, ip) if city is not None else None,
            asn=asn_record(asn) if asn is not None else None,
        )
        log.info("Done geolocalization of IP: %s. Elapsed time: %.3fs", ip, time.perf_counter() - started)
        return result

    def resolve_all(self, identifiers: Sequence[str]) -> List[GeoIpResult]:
        # строго последовательно; первая неразрешимая запись валит весь батч
        return [self.resolve(identifier) for identifier in identifiers]
