import pytest

from csms.database import database, queries
from csms.database.database import DataAccessError
from csms.models.models import ChargingStation, ChargingStationWithDetails


def test_all_stations_ordered_by_id(db):
    stations = queries.get_all_stations()
    assert [s.station_id for s in stations] == [1, 2, 3]
    assert all(isinstance(s, ChargingStation) for s in stations)


def test_station_by_id_found_and_missing(db):
    station = queries.get_station_by_id(1)
    assert station.station_alias == "서울역 충전소"
    assert station.station_status == "online"
    assert queries.get_station_by_id(999) is None


def test_station_with_details_counts_connectors(db):
    details = queries.get_station_with_details(1)
    assert isinstance(details, ChargingStationWithDetails)
    assert [e.evse_id for e in details.evses] == [10, 11]
    assert [c.connector_id for c in details.evses[0].connectors] == [100, 101]
    assert details.total_connectors == 3
    assert details.available_connectors == 1
    assert details.occupied_connectors == 1
    assert details.faulted_connectors == 1


def test_station_with_details_without_evses(db):
    details = queries.get_station_with_details(2)
    assert details.evses == []
    assert details.total_connectors == 0
    assert queries.get_station_with_details(999) is None


def test_stations_by_region_is_case_sensitive(db):
    assert [s.station_id for s in queries.get_stations_by_region("중구")] == [1]
    assert [s.station_id for s in queries.get_stations_by_region("Gangnam")] == [3]
    assert queries.get_stations_by_region("gangnam") == []
    assert queries.get_stations_by_region("%") == []


def test_online_stations(db):
    assert [s.station_id for s in queries.get_online_stations()] == [1, 3]


def test_evse_and_connector_lookups(db):
    assert [e.evse_id for e in queries.get_evses_by_station_id(1)] == [10, 11]
    assert queries.get_evses_by_station_id(999) == []
    assert queries.get_evse_by_id(11).status == "occupied"
    assert queries.get_evse_by_id(999) is None
    assert [c.connector_type for c in queries.get_connectors_by_evse_id(10)] == ["CCS", "CHAdeMO"]
    assert queries.get_connector_by_id(102).evse_id == 11
    assert queries.get_connector_by_id(999) is None


def test_recent_meter_values_most_recent_first(db):
    values = queries.get_recent_meter_values(1, limit=3)
    assert len(values) == 3
    sampled = [v.sampled_at for v in values]
    assert sampled == sorted(sampled, reverse=True)
    assert len(queries.get_recent_meter_values(1)) == 5


def test_recent_meter_values_by_evse_and_connector(db):
    by_evse = queries.get_recent_meter_values_by_evse(10)
    assert {v.evse_id for v in by_evse} == {10}
    by_connector = queries.get_recent_meter_values_by_connector(100, limit=1)
    assert len(by_connector) == 1
    assert by_connector[0].sampled_at == max(v.sampled_at for v in by_evse)


@pytest.mark.parametrize("limit", [0, -5])
def test_recent_meter_values_rejects_non_positive_limit(db, limit):
    with pytest.raises(ValueError):
        queries.get_recent_meter_values(1, limit=limit)


def test_ess_lookups(db):
    assert [e.ess_id for e in queries.get_ess_by_station_id(1)] == [1, 2]
    assert queries.get_ess_by_id(1).soc_percent == 81.5
    assert queries.get_ess_by_id(42) is None
    assert [(e.station_id, e.ess_id) for e in queries.get_all_ess()] == [(1, 1), (1, 2), (2, 3)]
    assert [e.ess_id for e in queries.get_ess_by_status("faulted")] == [3]
    with pytest.raises(ValueError):
        queries.get_ess_by_status("charging")


def test_unreachable_store_raises_data_access_error(broken_db):
    with pytest.raises(DataAccessError):
        queries.get_all_stations()
    assert database.test_connection() is False


def test_reachable_store_passes_connectivity_check(db):
    assert database.test_connection() is True
