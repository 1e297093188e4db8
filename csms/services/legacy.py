from csms.models.models import ChargingStation, ChargingStationLegacy


def region_of(address: str) -> str:
    """First space-delimited token of a road address ('' for an empty address)."""
    return (address or "").split(" ")[0]


def convert_to_legacy_format(station: ChargingStation) -> ChargingStationLegacy:
    return ChargingStationLegacy(
        station_name=station.station_alias,
        region=region_of(station.road_address),
        address=station.road_address,
        station_id=str(station.station_id),
        status="Online" if station.station_status == "online" else "Offline",
        update_time=station.update_time.isoformat(),
        latitude=station.latitude or None,
        longitude=station.longitude or None,
        evse_count=station.evse_count,
        station_load_kw=station.station_load_kw,
    )


def convert_array_to_legacy_format(stations: list[ChargingStation]) -> list[ChargingStationLegacy]:
    return [convert_to_legacy_format(s) for s in stations]
