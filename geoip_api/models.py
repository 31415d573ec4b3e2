from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# -----------------------------
# Ответ /api/v1/geoip
# None-поля в JSON не попадают вообще (exclude_none)
# -----------------------------
class IpData(BaseModel):
    ip: str
    ptr: Optional[str] = None


class CityData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    country_iso_code: Optional[str] = Field(None, alias="countryIsoCode")

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class AsnData(BaseModel):
    number: Optional[str] = None
    name: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class GeoIpResult(BaseModel):
    ip: IpData
    city: Optional[CityData] = None
    asn: Optional[AsnData] = None

    def to_json(self) -> dict:
        return self.model_dump(exclude_none=True, by_alias=True)


class DatasetInfo(BaseModel):
    kind: str
    database_type: str
    build_epoch: int


class HealthOut(BaseModel):
    status: str
    datasets: list[DatasetInfo]
