import logging
from typing import Optional

from fastapi import APIRouter

from csms.api.errors import ApiError, parse_id, parse_limit, require_store
from csms.database import queries
from csms.models.models import (
    Charger,
    ChargingStation,
    ChargingStationWithDetails,
    Connector,
    Ess,
    Evse,
    MeterValue,
)
from csms.services import charger_source
from csms.services.csv_source import load_charger_csv
from csms.services.legacy import convert_array_to_legacy_format

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/chargers", tags=["chargers"], response_model=list[Charger], response_model_exclude_none=True)
def list_chargers():
    """Dashboard records from the configured source (db | csv | fixtures)."""
    return charger_source.load_chargers()


@router.get("/chargers/{station_id}", tags=["chargers"], response_model=Optional[ChargingStation])
def get_charger(station_id: str):
    sid = parse_id(station_id, "충전소 ID")
    require_store()
    return queries.get_station_by_id(sid)


@router.get("/chargers/{station_id}/details", tags=["chargers"], response_model=Optional[ChargingStationWithDetails])
def get_charger_details(station_id: str):
    sid = parse_id(station_id, "충전소 ID")
    require_store()
    return queries.get_station_with_details(sid)


@router.get("/chargers/{station_id}/evses", tags=["chargers"], response_model=list[Evse])
def get_charger_evses(station_id: str):
    sid = parse_id(station_id, "충전소 ID")
    require_store()
    return queries.get_evses_by_station_id(sid)


@router.get("/chargers/{station_id}/ess", tags=["chargers"], response_model=list[Ess])
def get_charger_ess(station_id: str):
    sid = parse_id(station_id, "충전소 ID")
    require_store()
    return queries.get_ess_by_station_id(sid)


@router.get("/chargers/{station_id}/meter-values", tags=["chargers"], response_model=list[MeterValue])
def get_charger_meter_values(station_id: str, limit: Optional[str] = None):
    sid = parse_id(station_id, "충전소 ID")
    n = parse_limit(limit, 100)
    require_store()
    return queries.get_recent_meter_values(sid, n)


@router.get("/chargers/{station_id}/evses/{evse_id}/connectors", tags=["chargers"], response_model=list[Connector])
def get_evse_connectors(station_id: str, evse_id: str):
    parse_id(station_id, "충전소 ID")
    eid = parse_id(evse_id, "EVSE ID")
    require_store()
    return queries.get_connectors_by_evse_id(eid)


# ==========================
# Stations (canonical and legacy shapes)
# ==========================
@router.get("/stations", tags=["stations"], response_model=list[ChargingStation])
def list_stations(region: Optional[str] = None):
    require_store()
    if region:
        return queries.get_stations_by_region(region)
    return queries.get_all_stations()


@router.get("/stations/online", tags=["stations"], response_model=list[ChargingStation])
def list_online_stations():
    require_store()
    return queries.get_online_stations()


@router.get("/stations/legacy", tags=["stations"])
def list_legacy_stations():
    """Flat station list; read from the CSV file when that is the configured source."""
    if charger_source.CHARGERS_SOURCE == "csv":
        stations = load_charger_csv()
    else:
        require_store()
        stations = convert_array_to_legacy_format(queries.get_all_stations())
    return [s.model_dump(by_alias=True, exclude_none=True) for s in stations]


# ==========================
# EVSE / Connector / ESS by id
# ==========================
@router.get("/evses/{evse_id}", tags=["evses"], response_model=Optional[Evse])
def get_evse(evse_id: str):
    eid = parse_id(evse_id, "EVSE ID")
    require_store()
    return queries.get_evse_by_id(eid)


@router.get("/evses/{evse_id}/meter-values", tags=["evses"], response_model=list[MeterValue])
def get_evse_meter_values(evse_id: str, limit: Optional[str] = None):
    eid = parse_id(evse_id, "EVSE ID")
    n = parse_limit(limit, 50)
    require_store()
    return queries.get_recent_meter_values_by_evse(eid, n)


@router.get("/connectors/{connector_id}", tags=["connectors"], response_model=Optional[Connector])
def get_connector(connector_id: str):
    cid = parse_id(connector_id, "커넥터 ID")
    require_store()
    return queries.get_connector_by_id(cid)


@router.get("/connectors/{connector_id}/meter-values", tags=["connectors"], response_model=list[MeterValue])
def get_connector_meter_values(connector_id: str, limit: Optional[str] = None):
    cid = parse_id(connector_id, "커넥터 ID")
    n = parse_limit(limit, 50)
    require_store()
    return queries.get_recent_meter_values_by_connector(cid, n)


@router.get("/ess", tags=["ess"], response_model=list[Ess])
def list_ess(status: Optional[str] = None):
    require_store()
    if status:
        try:
            return queries.get_ess_by_status(status)
        except ValueError as e:
            raise ApiError(400, str(e))
    return queries.get_all_ess()


@router.get("/ess/{ess_id}", tags=["ess"], response_model=Optional[Ess])
def get_ess(ess_id: str):
    esid = parse_id(ess_id, "ESS ID")
    require_store()
    return queries.get_ess_by_id(esid)
