import asyncio
import logging
import time
from typing import List

from fastapi import FastAPI, Body, Depends, HTTPException, Request

from .settings import HOST, PORT, LOG_LEVEL
from .datasets import Datasets, init_datasets, describe
from .dns import ResolutionError
from .models import GeoIpResult, HealthOut
from .resolver import GeoIpResolver

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)-5s %(name)s > %(message)s")
log = logging.getLogger(__name__)

app = FastAPI(title="GeoIP: city + ASN + PTR for a batch of hosts")


def get_datasets(request: Request) -> Datasets:
    ds = getattr(request.app.state, "datasets", None)
    if ds is None:
        raise HTTPException(503, "GeoIP databases are not loaded")
    return ds


def get_resolver(ds: Datasets = Depends(get_datasets)) -> GeoIpResolver:
    return GeoIpResolver(ds.city, ds.asn)


# -----------------------------
# Базы открываем при старте; если их нет — сервер не стартует
# -----------------------------
@app.on_event("startup")
async def on_startup():
    # открытые readers живут в app.state, в обработчики попадают через Depends
    app.state.datasets = init_datasets()


@app.get("/api/v1/health", response_model=HealthOut)
async def health(ds: Datasets = Depends(get_datasets)):
    return HealthOut(status="ok", datasets=describe(ds))


# POST /api/v1/geoip  ["8.8.8.8", "example.com", ...]
@app.post("/api/v1/geoip", response_model=List[GeoIpResult], response_model_exclude_none=True)
async def geoip(ips: List[str] = Body(...), resolver: GeoIpResolver = Depends(get_resolver)):
    started = time.perf_counter()
    log.info("Received an GeoIP request for IPs: %s", ips)

    # DNS и чтение баз блокирующие — уводим с event loop
    try:
        results = await asyncio.to_thread(resolver.resolve_all, ips)
    except ResolutionError as e:
        log.error("GeoIP request failed: %s", e)
        raise HTTPException(422, f"Could not resolve '{e.identifier}'")

    log.info("Finished GeoIP requests. Elapsed time: %.3fs", time.perf_counter() - started)
    return [r.to_json() for r in results]


def run():
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
