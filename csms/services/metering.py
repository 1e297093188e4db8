"""Metering report options and the parameters sent with a configuration push."""
from pydantic import BaseModel, field_validator

MEASUREMENT_UNITS: dict[str, list[str]] = {
    "reactive-power": ["W", "kW", "MW"],
    "power": ["W", "kW", "MW"],
    "energy": ["Wh", "kWh", "MWh"],
    "power-factor": ["ratio", "percent"],
    "soc": ["percent", "ratio"],
    "voltage": ["V", "kV", "mV"],
    "current": ["A", "kA", "mA"],
}
TARGET_COMPONENTS = ("station", "evse", "inlet", "outlet")
DATA_DIRECTIONS = ("from-grid", "to-grid", "both")

# Query parameters of /setvariables/create and the value used when one is absent
SETVARIABLE_DEFAULTS: dict[str, str] = {
    "stationId": "",
    "targetComponent": "",
    "dataDirection": "",
    "measurementType": "",
    "measurementUnit": "",
    "interval": "",
    "alertsEnabled": "false",
    "alertsStart": "false",
    "alertsEnd": "false",
    "alertsDuring": "false",
}


def unit_options(measurement_type: str) -> list[str]:
    return MEASUREMENT_UNITS.get(measurement_type, ["unit"])


def default_unit(measurement_type: str) -> str:
    return unit_options(measurement_type)[0]


def _flag(value: bool) -> str:
    return "true" if value else "false"


class MeteringConfiguration(BaseModel):
    interval: int = 3600
    measurement_type: str = "energy"
    measurement_unit: str = "kWh"
    target_component: str = "station"
    data_direction: str = "from-grid"
    alerts_enabled: bool = True
    alerts_start: bool = True
    alerts_end: bool = True
    alerts_during: bool = False

    @field_validator("target_component")
    @classmethod
    def _known_component(cls, value: str) -> str:
        if value not in TARGET_COMPONENTS:
            raise ValueError(f"target component must be one of {TARGET_COMPONENTS}")
        return value

    @field_validator("data_direction")
    @classmethod
    def _known_direction(cls, value: str) -> str:
        if value not in DATA_DIRECTIONS:
            raise ValueError(f"data direction must be one of {DATA_DIRECTIONS}")
        return value

    def with_measurement_type(self, measurement_type: str) -> "MeteringConfiguration":
        """Switching the measurement type also resets the unit to its first option."""
        return self.model_copy(update={
            "measurement_type": measurement_type,
            "measurement_unit": default_unit(measurement_type),
        })

    def to_query_params(self, station_id) -> dict[str, str]:
        return {
            "stationId": str(station_id),
            "targetComponent": self.target_component,
            "dataDirection": self.data_direction,
            "measurementType": self.measurement_type,
            "measurementUnit": self.measurement_unit,
            "interval": str(self.interval),
            "alertsEnabled": _flag(self.alerts_enabled),
            "alertsStart": _flag(self.alerts_start),
            "alertsEnd": _flag(self.alerts_end),
            "alertsDuring": _flag(self.alerts_during),
        }


def forwarded_params(query: dict) -> dict[str, str]:
    """Every known parameter, with empty or missing ones replaced by their default."""
    return {name: query.get(name) or default for name, default in SETVARIABLE_DEFAULTS.items()}
