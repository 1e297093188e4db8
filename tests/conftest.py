import os
from datetime import datetime, timedelta

# Settings are read at import time
os.environ["AUTH_REQUIRED"] = "false"
os.environ["AUTH_USERNAME"] = "admin"
os.environ["AUTH_PASSWORD"] = "admin1"
os.environ["CHARGERS_SOURCE"] = "fixtures"
os.environ["DASHBOARD_FALLBACK"] = "fixtures"
os.environ["NEXT_PUBLIC_API_BASE_URL"] = "http://upstream.test"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from csms.database import database  # noqa: E402
from csms.database.schema import (  # noqa: E402
    charging_station,
    connector,
    ess,
    evse,
    meter_value,
    metadata,
)

BASE_TIME = datetime(2024, 5, 1, 9, 0, 0)


def _seed(conn):
    conn.execute(charging_station.insert(), [
        dict(station_id=1, station_alias="서울역 충전소", road_address="서울특별시 중구 한강대로 405",
             station_status="online", update_time=BASE_TIME, evse_count=2, station_load_kw=120.5,
             latitude=37.5547, longitude=126.9707),
        dict(station_id=2, station_alias="부산역 충전소", road_address="부산광역시 동구 중앙대로 206",
             station_status="offline", update_time=BASE_TIME, evse_count=0, station_load_kw=0.0,
             latitude=None, longitude=None),
        dict(station_id=3, station_alias="Gangnam Hub", road_address="Seoul Gangnam-gu Teheran-ro 1",
             station_status="online", update_time=BASE_TIME, evse_count=0, station_load_kw=0.0,
             latitude=None, longitude=None),
    ])
    conn.execute(evse.insert(), [
        dict(evse_id=10, station_id=1, status="available", max_power_kw=100.0, connector_count=2, update_time=BASE_TIME),
        dict(evse_id=11, station_id=1, status="occupied", max_power_kw=50.0, connector_count=1, update_time=BASE_TIME),
    ])
    conn.execute(connector.insert(), [
        dict(connector_id=100, evse_id=10, connector_type="CCS", max_power_kw=100.0, status="available", update_time=BASE_TIME),
        dict(connector_id=101, evse_id=10, connector_type="CHAdeMO", max_power_kw=50.0, status="faulted", update_time=BASE_TIME),
        dict(connector_id=102, evse_id=11, connector_type="AC_Type2", max_power_kw=22.0, status="occupied", update_time=BASE_TIME),
    ])
    conn.execute(meter_value.insert(), [
        dict(meter_value_id=i, station_id=1, evse_id=10 if i % 2 else 11, connector_id=100 if i % 2 else None,
             transaction_id=f"tx-{i}", sampled_at=BASE_TIME + timedelta(minutes=(i * 7) % 5 * 10),
             location="Outlet", created_at=BASE_TIME)
        for i in range(1, 6)
    ])
    conn.execute(ess.insert(), [
        dict(ess_id=1, station_id=1, manufacturer="LG", model="RESU", capacity_kwh=200.0,
             ess_status="online", soc_percent=81.5, soh_percent=97.0, last_update_at=BASE_TIME),
        dict(ess_id=2, station_id=1, manufacturer=None, model=None, capacity_kwh=100.0,
             ess_status="maintenance", soc_percent=None, soh_percent=None, last_update_at=BASE_TIME),
        dict(ess_id=3, station_id=2, manufacturer=None, model=None, capacity_kwh=150.0,
             ess_status="faulted", soc_percent=None, soh_percent=None, last_update_at=BASE_TIME),
    ])


@pytest.fixture
def db(tmp_path):
    engine = database.configure_engine(f"sqlite:///{tmp_path / 'csms.db'}")
    metadata.create_all(engine)
    with engine.begin() as conn:
        _seed(conn)
    yield engine
    database.close_pool()


@pytest.fixture
def broken_db(tmp_path):
    engine = database.configure_engine(f"sqlite:///{tmp_path / 'missing' / 'csms.db'}")
    yield engine
    database.close_pool()


@pytest.fixture
def client():
    from csms.main import app

    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
