import logging
import os
from datetime import datetime, timedelta, timezone

from csms.database import queries
from csms.models.models import Charger, ChargingStation, ChargingStationLegacy
from csms.services.csv_source import load_charger_csv

logger = logging.getLogger(__name__)

# db | csv | fixtures
CHARGERS_SOURCE = os.getenv("CHARGERS_SOURCE", "fixtures").lower()
SOURCES = ("db", "csv", "fixtures")


def fixture_chargers(now: datetime | None = None) -> list[Charger]:
    """Development records served when no real source is configured."""
    now = now or datetime.now(timezone.utc)
    return [
        Charger(id="CHG001", name="서울역 충전소", location="서울특별시 중구",
                status="normal", message_type="heartbeat", last_connection=now),
        Charger(id="CHG002", name="강남역 충전소", location="서울특별시 강남구",
                status="normal", message_type="bootnotification", last_connection=now),
        Charger(id="CHG003", name="부산역 충전소", location="부산광역시 해운대구",
                status="disconnected", last_connection=now - timedelta(hours=1)),
        Charger(id="CHG004", name="인천공항 충전소", location="인천광역시 중구",
                status="normal", message_type="heartbeat", last_connection=now),
        Charger(id="CHG005", name="대전역 충전소", location="대전광역시 동구",
                status="disconnected", last_connection=now - timedelta(hours=2)),
    ]


def charger_from_station(station: ChargingStation) -> Charger:
    return Charger(
        id=str(station.station_id),
        name=station.station_alias,
        location=station.road_address,
        status="normal" if station.station_status == "online" else "disconnected",
        last_connection=station.update_time,
    )


def charger_from_legacy(station: ChargingStationLegacy) -> Charger:
    return Charger(
        id=station.station_id,
        name=station.station_name,
        location=station.address,
        status="normal" if station.status == "Online" else "disconnected",
        last_connection=station.update_time,
    )


def load_chargers(source: str | None = None) -> list[Charger]:
    source = (source or CHARGERS_SOURCE).lower()
    if source not in SOURCES:
        logger.warning("Unknown CHARGERS_SOURCE %r, serving fixtures", source)
        source = "fixtures"
    if source == "db":
        return [charger_from_station(s) for s in queries.get_all_stations()]
    if source == "csv":
        return [charger_from_legacy(s) for s in load_charger_csv()]
    return fixture_chargers()
