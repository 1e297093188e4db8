# models.py
from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

StationStatus = Literal["online", "offline"]
EvseStatus = Literal["available", "occupied", "faulted"]
ConnectorType = Literal["CCS", "CHAdeMO", "AC_Type2", "GB_T", "Other"]
MeasurementLocation = Literal["Body", "Cable", "EV", "Inlet", "Outlet"]
EssStatus = Literal["online", "offline", "faulted", "maintenance"]

ESS_STATUSES = ("online", "offline", "faulted", "maintenance")


class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChargingStation(CamelModel):
    station_id: int
    station_alias: str
    road_address: str = ""
    station_status: StationStatus
    update_time: datetime
    evse_count: int = 0
    station_load_kw: float = 0.0
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class Evse(CamelModel):
    evse_id: int
    station_id: int
    status: EvseStatus
    max_power_kw: float = 0.0
    connector_count: int = 0
    update_time: datetime


class Connector(CamelModel):
    connector_id: int
    evse_id: int
    connector_type: ConnectorType
    max_power_kw: float = 0.0
    status: EvseStatus
    update_time: Optional[datetime] = None


class MeterValue(CamelModel):
    meter_value_id: int
    station_id: int
    evse_id: int
    connector_id: Optional[int] = None
    transaction_id: Optional[str] = None
    sampled_at: datetime
    location: MeasurementLocation
    created_at: Optional[datetime] = None


class Ess(CamelModel):
    ess_id: int
    station_id: int
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    commissioned_at: Optional[datetime] = None
    warranty_until: Optional[datetime] = None
    capacity_kwh: float
    rated_power_kw: Optional[float] = None
    max_charge_power_kw: Optional[float] = None
    max_discharge_power_kw: Optional[float] = None
    voltage_min: Optional[float] = None
    voltage_max: Optional[float] = None
    phases: Optional[int] = None
    ess_status: EssStatus
    soc_percent: Optional[float] = None
    soh_percent: Optional[float] = None
    temperature_c: Optional[float] = None
    cycle_count: Optional[int] = None
    last_update_at: datetime


class EvseWithDetails(Evse):
    connectors: list[Connector] = []


class ChargingStationWithDetails(ChargingStation):
    evses: list[EvseWithDetails] = []
    total_connectors: int = 0
    available_connectors: int = 0
    occupied_connectors: int = 0
    faulted_connectors: int = 0


class ChargingStationLegacy(CamelModel):
    """Flat station shape used by the configuration screen and the CSV file."""

    station_name: str
    region: str
    address: str
    station_id: str
    status: Literal["Online", "Offline"]
    update_time: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    evse_count: Optional[int] = None
    station_load_kw: Optional[float] = None


class Charger(CamelModel):
    """Dashboard record. Status is normally 'normal' or 'disconnected'."""

    id: str
    name: str
    location: str = ""
    status: str
    message_type: Optional[str] = None   # bootnotification | heartbeat
    last_connection: Optional[Union[datetime, str]] = None
