import logging
from dataclasses import dataclass

import geoip2.database
import maxminddb

from .settings import CITY_DB_PATH, ASN_DB_PATH

log = logging.getLogger(__name__)


class DatasetError(RuntimeError):
    """A GeoLite2 database could not be opened; the service must not start."""


@dataclass(frozen=True)
class Datasets:
    city: geoip2.database.Reader
    asn: geoip2.database.Reader


def open_reader(path: str, expected_type: str) -> geoip2.database.Reader:
    try:
        reader = geoip2.database.Reader(path)
    except (OSError, ValueError, maxminddb.InvalidDatabaseError) as e:
        raise DatasetError(f"Cannot open GeoIP database {path}: {e}") from e

    db_type = reader.metadata().database_type
    if expected_type not in db_type:
        reader.close()
        raise DatasetError(f"{path} is a {db_type} database, expected {expected_type}")

    log.info("Opened %s database %s", db_type, path)
    return reader


def init_datasets(city_path: str = CITY_DB_PATH, asn_path: str = ASN_DB_PATH) -> Datasets:
    city = open_reader(city_path, "City")
    try:
        asn = open_reader(asn_path, "ASN")
    except DatasetError:
        city.close()
        raise
    return Datasets(city=city, asn=asn)


def describe(datasets: Datasets) -> list[dict]:
    out = []
    for kind, reader in (("city", datasets.city), ("asn", datasets.asn)):
        meta = reader.metadata()
        out.append({"kind": kind, "database_type": meta.database_type, "build_epoch": meta.build_epoch})
    return out
