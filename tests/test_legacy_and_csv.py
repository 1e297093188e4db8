from datetime import datetime
from pathlib import Path

import pytest

from csms.models.models import ChargingStation
from csms.services.csv_source import load_charger_csv, parse_charger_csv, parse_row
from csms.services.legacy import convert_array_to_legacy_format, convert_to_legacy_format, region_of

DATA_CSV = Path(__file__).resolve().parent.parent / "data" / "chargers.csv"


def _station(**overrides):
    values = dict(
        station_id=7,
        station_alias="시청 충전소",
        road_address="서울특별시 중구 세종대로 110",
        station_status="online",
        update_time=datetime(2024, 5, 1, 9, 30),
        evse_count=4,
        station_load_kw=88.0,
        latitude=37.56,
        longitude=126.97,
    )
    values.update(overrides)
    return ChargingStation(**values)


def test_legacy_format_fields():
    legacy = convert_to_legacy_format(_station())
    assert legacy.model_dump(by_alias=True) == {
        "stationName": "시청 충전소",
        "region": "서울특별시",
        "address": "서울특별시 중구 세종대로 110",
        "stationId": "7",
        "status": "Online",
        "updateTime": "2024-05-01T09:30:00",
        "latitude": 37.56,
        "longitude": 126.97,
        "evseCount": 4,
        "stationLoadKw": 88.0,
    }


@pytest.mark.parametrize("status,expected", [("online", "Online"), ("offline", "Offline")])
def test_legacy_status_follows_station_status(status, expected):
    assert convert_to_legacy_format(_station(station_status=status)).status == expected


@pytest.mark.parametrize("address,region", [
    ("", ""),
    ("부산광역시", "부산광역시"),
    ("Seoul Jung-gu", "Seoul"),
    (" leading space", ""),
])
def test_region_is_first_space_token(address, region):
    assert region_of(address) == region
    assert convert_to_legacy_format(_station(road_address=address)).region == region


def test_missing_coordinates_are_dropped():
    legacy = convert_to_legacy_format(_station(latitude=None, longitude=None))
    dumped = legacy.model_dump(by_alias=True, exclude_none=True)
    assert "latitude" not in dumped and "longitude" not in dumped


# Zero coordinates count as missing, like an unset position
def test_zero_coordinates_are_dropped():
    legacy = convert_to_legacy_format(_station(latitude=0.0, longitude=0.0))
    assert legacy.latitude is None
    assert legacy.longitude is None


def test_convert_array_keeps_order():
    stations = [_station(station_id=2), _station(station_id=1)]
    assert [s.station_id for s in convert_array_to_legacy_format(stations)] == ["2", "1"]


def test_parse_row_online():
    row = parse_row("A,B,C,D,Online,T")
    assert row.model_dump(by_alias=True, exclude_none=True) == {
        "stationName": "A",
        "region": "B",
        "address": "C",
        "stationId": "D",
        "status": "Online",
        "updateTime": "T",
    }


@pytest.mark.parametrize("status", ["Unknown", "online", "ONLINE", ""])
def test_parse_row_anything_else_is_offline(status):
    assert parse_row(f"A,B,C,D,{status},T").status == "Offline"


def test_parse_csv_skips_header_blank_and_short_lines():
    content = "name,region,address,id,status,time\r\nA,B,C,D,Online,T\r\n\r\nshort,row\r\nE,F,G,H,Offline,U\r\n"
    rows = parse_charger_csv(content)
    assert [r.station_id for r in rows] == ["D", "H"]


def test_load_bundled_csv():
    rows = load_charger_csv(DATA_CSV)
    assert len(rows) == 4
    assert [r.status for r in rows] == ["Online", "Online", "Offline", "Offline"]
    assert rows[0].station_name == "서울역 충전소"


def test_load_csv_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_charger_csv(tmp_path / "nope.csv")
