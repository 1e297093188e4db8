from sqlalchemy import Column, DateTime, Float, Integer, MetaData, String, Table

metadata = MetaData()

charging_station = Table(
    "ChargingStation",
    metadata,
    Column("station_id", Integer, primary_key=True),
    Column("station_alias", String(100), nullable=False),
    Column("road_address", String(255), nullable=False, default=""),
    Column("station_status", String(16), nullable=False),   # online | offline
    Column("update_time", DateTime, nullable=False),
    Column("evse_count", Integer, nullable=False, default=0),
    Column("station_load_kw", Float, nullable=False, default=0.0),
    Column("latitude", Float),
    Column("longitude", Float),
)

evse = Table(
    "Evse",
    metadata,
    Column("evse_id", Integer, primary_key=True),
    Column("station_id", Integer, nullable=False, index=True),
    Column("status", String(16), nullable=False),   # available | occupied | faulted
    Column("max_power_kw", Float, nullable=False, default=0.0),
    Column("connector_count", Integer, nullable=False, default=0),
    Column("update_time", DateTime, nullable=False),
)

connector = Table(
    "Connector",
    metadata,
    Column("connector_id", Integer, primary_key=True),
    Column("evse_id", Integer, nullable=False, index=True),
    Column("connector_type", String(16), nullable=False),
    Column("max_power_kw", Float, nullable=False, default=0.0),
    Column("status", String(16), nullable=False),
    Column("update_time", DateTime, nullable=False),
)

meter_value = Table(
    "MeterValue",
    metadata,
    Column("meter_value_id", Integer, primary_key=True),
    Column("station_id", Integer, nullable=False, index=True),
    Column("evse_id", Integer, nullable=False, index=True),
    Column("connector_id", Integer, index=True),
    Column("transaction_id", String(64)),
    Column("sampled_at", DateTime, nullable=False, index=True),
    Column("location", String(16), nullable=False),   # Body | Cable | EV | Inlet | Outlet
    Column("created_at", DateTime),
)

ess = Table(
    "Ess",
    metadata,
    Column("ess_id", Integer, primary_key=True),
    Column("station_id", Integer, nullable=False, index=True),
    Column("manufacturer", String(100)),
    Column("model", String(100)),
    Column("serial_number", String(100)),
    Column("commissioned_at", DateTime),
    Column("warranty_until", DateTime),
    Column("capacity_kwh", Float, nullable=False),
    Column("rated_power_kw", Float),
    Column("max_charge_power_kw", Float),
    Column("max_discharge_power_kw", Float),
    Column("voltage_min", Float),
    Column("voltage_max", Float),
    Column("phases", Integer),
    Column("ess_status", String(16), nullable=False),   # online | offline | faulted | maintenance
    Column("soc_percent", Float),
    Column("soh_percent", Float),
    Column("temperature_c", Float),
    Column("cycle_count", Integer),
    Column("last_update_at", DateTime, nullable=False),
)
