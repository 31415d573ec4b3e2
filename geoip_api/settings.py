import os

DATA_DIR = os.getenv("GEOIP_DATA_DIR", ".")

# Базы GeoLite2 (City + ASN), открываются один раз при старте
CITY_DB_PATH = os.getenv("GEOIP_CITY_DB", os.path.join(DATA_DIR, "GeoLite2-City.mmdb"))
ASN_DB_PATH  = os.getenv("GEOIP_ASN_DB", os.path.join(DATA_DIR, "GeoLite2-ASN.mmdb"))

HOST = os.getenv("GEOIP_HOST", "127.0.0.1")
PORT = int(os.getenv("GEOIP_PORT", "7881"))
LOG_LEVEL = os.getenv("GEOIP_LOG_LEVEL", "INFO").upper()
