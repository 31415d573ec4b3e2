"""GeoIP + ASN enrichment service backed by MaxMind GeoLite2 databases."""

__version__ = "0.1.0"
