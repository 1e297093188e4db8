"""Station list read from a plain comma-separated file.

Columns: station name, region, address, station id, status, update time.
The first line is a header. Quoting is not supported, so a field that
contains a comma shifts the remaining columns.
"""
import logging
import os
from pathlib import Path

from csms.models.models import ChargingStationLegacy

logger = logging.getLogger(__name__)

CHARGERS_CSV_PATH = os.getenv("CHARGERS_CSV_PATH", "data/chargers.csv")

COLUMNS = ("station_name", "region", "address", "station_id", "status", "update_time")


def parse_row(line: str) -> ChargingStationLegacy | None:
    fields = [f.strip() for f in line.rstrip("\r\n").split(",")]
    if len(fields) < len(COLUMNS):
        return None
    values = dict(zip(COLUMNS, fields))
    values["status"] = "Online" if values["status"] == "Online" else "Offline"
    return ChargingStationLegacy(**values)


def parse_charger_csv(content: str) -> list[ChargingStationLegacy]:
    stations = []
    lines = content.splitlines()
    for number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        row = parse_row(line)
        if row is None:
            logger.warning("CSV line %d has fewer than %d columns, skipped", number, len(COLUMNS))
            continue
        stations.append(row)
    return stations


def load_charger_csv(path: str | os.PathLike | None = None) -> list[ChargingStationLegacy]:
    csv_path = Path(path or CHARGERS_CSV_PATH)
    content = csv_path.read_text(encoding="utf-8-sig")
    stations = parse_charger_csv(content)
    logger.info("Loaded %d stations from %s", len(stations), csv_path)
    return stations
