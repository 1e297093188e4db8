"""Read-only lookups against the charging-station store.

Single-row lookups return ``None`` when nothing matches; collection lookups
return an empty list. Store failures raise ``DataAccessError``.
"""
from typing import Optional

from sqlalchemy import select

from csms.database.database import connection
from csms.database.schema import charging_station, connector, ess, evse, meter_value
from csms.models.models import (
    ESS_STATUSES,
    ChargingStation,
    ChargingStationWithDetails,
    Connector,
    Ess,
    Evse,
    EvseWithDetails,
    MeterValue,
)


def _rows(stmt) -> list[dict]:
    with connection() as conn:
        return [dict(r._mapping) for r in conn.execute(stmt)]


def _first(stmt) -> Optional[dict]:
    rows = _rows(stmt)
    return rows[0] if rows else None


def _check_limit(limit: int):
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")


# ==========================
# Stations
# ==========================
def get_all_stations() -> list[ChargingStation]:
    stmt = select(charging_station).order_by(charging_station.c.station_id)
    return [ChargingStation.model_validate(r) for r in _rows(stmt)]


def get_station_by_id(station_id: int) -> Optional[ChargingStation]:
    row = _first(select(charging_station).where(charging_station.c.station_id == station_id))
    return ChargingStation.model_validate(row) if row else None


def get_station_with_details(station_id: int) -> Optional[ChargingStationWithDetails]:
    """Station plus its EVSEs (each with connectors) and connector counts by status."""
    with connection() as conn:
        row = conn.execute(
            select(charging_station).where(charging_station.c.station_id == station_id)
        ).first()
        if row is None:
            return None

        evse_rows = conn.execute(
            select(evse).where(evse.c.station_id == station_id).order_by(evse.c.evse_id)
        ).all()
        evses = []
        for e in evse_rows:
            connector_rows = conn.execute(
                select(connector).where(connector.c.evse_id == e.evse_id).order_by(connector.c.connector_id)
            ).all()
            evses.append(EvseWithDetails(
                **dict(e._mapping),
                connectors=[Connector.model_validate(dict(c._mapping)) for c in connector_rows],
            ))

    connectors = [c for e in evses for c in e.connectors]
    return ChargingStationWithDetails(
        **dict(row._mapping),
        evses=evses,
        total_connectors=len(connectors),
        available_connectors=sum(1 for c in connectors if c.status == "available"),
        occupied_connectors=sum(1 for c in connectors if c.status == "occupied"),
        faulted_connectors=sum(1 for c in connectors if c.status == "faulted"),
    )


def get_online_stations() -> list[ChargingStation]:
    stmt = (
        select(charging_station)
        .where(charging_station.c.station_status == "online")
        .order_by(charging_station.c.station_id)
    )
    return [ChargingStation.model_validate(r) for r in _rows(stmt)]


def get_stations_by_region(region: str) -> list[ChargingStation]:
    """Stations whose road address contains ``region`` (case-sensitive)."""
    stmt = (
        select(charging_station)
        .where(charging_station.c.road_address.contains(region, autoescape=True))
        .order_by(charging_station.c.station_id)
    )
    # LIKE follows the column collation, which is usually case-insensitive
    return [
        ChargingStation.model_validate(r)
        for r in _rows(stmt)
        if region in (r.get("road_address") or "")
    ]


# ==========================
# EVSE / Connector
# ==========================
def get_evses_by_station_id(station_id: int) -> list[Evse]:
    stmt = select(evse).where(evse.c.station_id == station_id).order_by(evse.c.evse_id)
    return [Evse.model_validate(r) for r in _rows(stmt)]


def get_evse_by_id(evse_id: int) -> Optional[Evse]:
    row = _first(select(evse).where(evse.c.evse_id == evse_id))
    return Evse.model_validate(row) if row else None


def get_connectors_by_evse_id(evse_id: int) -> list[Connector]:
    stmt = select(connector).where(connector.c.evse_id == evse_id).order_by(connector.c.connector_id)
    return [Connector.model_validate(r) for r in _rows(stmt)]


def get_connector_by_id(connector_id: int) -> Optional[Connector]:
    row = _first(select(connector).where(connector.c.connector_id == connector_id))
    return Connector.model_validate(row) if row else None


# ==========================
# Meter values (most recent first)
# ==========================
def _recent_meter_values(column, value: int, limit: int) -> list[MeterValue]:
    _check_limit(limit)
    stmt = (
        select(meter_value)
        .where(column == value)
        .order_by(meter_value.c.sampled_at.desc())
        .limit(limit)
    )
    return [MeterValue.model_validate(r) for r in _rows(stmt)]


def get_recent_meter_values(station_id: int, limit: int = 100) -> list[MeterValue]:
    return _recent_meter_values(meter_value.c.station_id, station_id, limit)


def get_recent_meter_values_by_evse(evse_id: int, limit: int = 50) -> list[MeterValue]:
    return _recent_meter_values(meter_value.c.evse_id, evse_id, limit)


def get_recent_meter_values_by_connector(connector_id: int, limit: int = 50) -> list[MeterValue]:
    return _recent_meter_values(meter_value.c.connector_id, connector_id, limit)


# ==========================
# ESS
# ==========================
def get_ess_by_station_id(station_id: int) -> list[Ess]:
    stmt = select(ess).where(ess.c.station_id == station_id).order_by(ess.c.ess_id)
    return [Ess.model_validate(r) for r in _rows(stmt)]


def get_ess_by_id(ess_id: int) -> Optional[Ess]:
    row = _first(select(ess).where(ess.c.ess_id == ess_id))
    return Ess.model_validate(row) if row else None


def get_all_ess() -> list[Ess]:
    stmt = select(ess).order_by(ess.c.station_id, ess.c.ess_id)
    return [Ess.model_validate(r) for r in _rows(stmt)]


def get_ess_by_status(status: str) -> list[Ess]:
    if status not in ESS_STATUSES:
        raise ValueError(f"unknown ESS status {status!r}")
    stmt = select(ess).where(ess.c.ess_status == status).order_by(ess.c.station_id, ess.c.ess_id)
    return [Ess.model_validate(r) for r in _rows(stmt)]
