import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
from dotenv import load_dotenv

from csms.models.models import Charger, ChargingStation, Connector, Ess, Evse, MeterValue
from csms.services.metering import MeteringConfiguration

load_dotenv()

logger = logging.getLogger(__name__)

CSMS_API_BASE_URL = os.getenv("CSMS_API_BASE_URL", "http://localhost:8000/api")
CSMS_STORAGE_PATH = os.getenv("CSMS_STORAGE_PATH", str(Path.home() / ".csms" / "storage.json"))
CSMS_TIMEOUT = float(os.getenv("CSMS_TIMEOUT", "10"))

TOKEN_KEY = "authToken"


class LocalStorage:
    """Small key/value store persisted as JSON; in memory when ``path`` is None."""

    def __init__(self, path: str | os.PathLike | None = None):
        self.path = Path(path) if path else None
        self._items: dict[str, str] = {}
        if self.path and self.path.exists():
            self._items = json.loads(self.path.read_text(encoding="utf-8") or "{}")

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str):
        self._items[key] = value
        self._save()

    def remove_item(self, key: str):
        if self._items.pop(key, None) is not None:
            self._save()

    def _save(self):
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._items), encoding="utf-8")


def _redirect_to_login():
    logger.warning("Session expired; login required")


def _unwrap(payload: Any) -> Any:
    # Some backends answer {"success": ..., "data": ...}, the local API answers bare payloads
    if isinstance(payload, dict) and "data" in payload and "success" in payload:
        return payload["data"]
    return payload


def _records(model, data: Any) -> list:
    if not isinstance(data, list):
        raise ValueError(f"expected a list of {model.__name__} records, got {type(data).__name__}")
    return [model.model_validate(item) for item in data]


class CsmsClient:
    """Async client for the dashboard API.

    Every request carries the stored bearer token. A 401 answer removes the
    token and calls ``on_unauthorized`` whatever the request was; every
    non-2xx answer is raised to the caller as ``httpx.HTTPStatusError``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        storage: Optional[LocalStorage] = None,
        on_unauthorized: Callable[[], None] = _redirect_to_login,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.storage = storage if storage is not None else LocalStorage(CSMS_STORAGE_PATH)
        self.on_unauthorized = on_unauthorized
        self._client = httpx.AsyncClient(
            base_url=(base_url or CSMS_API_BASE_URL).rstrip("/"),
            timeout=timeout or CSMS_TIMEOUT,
            headers={"Content-Type": "application/json"},
            event_hooks={"request": [self._on_request], "response": [self._on_response]},
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def close(self):
        await self._client.aclose()

    # ==========================
    # Hooks
    # ==========================
    async def _on_request(self, request: httpx.Request):
        token = self.storage.get_item(TOKEN_KEY)
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        logger.info("[API Request] %s %s", request.method, request.url)

    async def _on_response(self, response: httpx.Response):
        request = response.request
        if response.is_success:
            logger.info("[API Response] %s %s", response.status_code, request.url)
            return

        await response.aread()
        logger.error(
            "[API Response Error] status=%s url=%s data=%s",
            response.status_code, request.url, response.text,
        )
        if response.status_code == 401:
            self.storage.remove_item(TOKEN_KEY)
            self.on_unauthorized()
        elif response.status_code == 403:
            logger.error("Access denied. Insufficient permissions.")
        elif response.status_code >= 500:
            logger.error("Server error. Please try again later.")

    async def _get(self, path: str, **kwargs) -> Any:
        resp = await self._client.get(path, **kwargs)
        resp.raise_for_status()
        return _unwrap(resp.json())

    async def _put(self, path: str, body: dict):
        resp = await self._client.put(path, json=body)
        resp.raise_for_status()

    # ==========================
    # Session
    # ==========================
    async def login(self, username: str, password: str) -> str:
        resp = await self._client.post("/auth/login", json={"username": username, "password": password})
        resp.raise_for_status()
        token = resp.json()["token"]
        self.storage.set_item(TOKEN_KEY, token)
        return token

    def logout(self):
        self.storage.remove_item(TOKEN_KEY)

    # ==========================
    # Stations
    # ==========================
    async def get_dashboard_chargers(self) -> list[Charger]:
        data = await self._get("/chargers")
        return _records(Charger, data)

    async def get_chargers(self) -> list[ChargingStation]:
        data = await self._get("/stations")
        return _records(ChargingStation, data)

    async def get_charger_by_id(self, station_id: int) -> Optional[ChargingStation]:
        data = await self._get(f"/chargers/{station_id}")
        return ChargingStation.model_validate(data) if data else None

    async def get_evses(self, station_id: int) -> list[Evse]:
        data = await self._get(f"/chargers/{station_id}/evses")
        return _records(Evse, data)

    async def get_ess(self, station_id: int) -> list[Ess]:
        data = await self._get(f"/chargers/{station_id}/ess")
        return _records(Ess, data)

    async def get_meter_values(self, station_id: int, limit: int = 100) -> list[MeterValue]:
        data = await self._get(f"/chargers/{station_id}/meter-values", params={"limit": limit})
        return _records(MeterValue, data)

    async def get_connectors(self, station_id: int, evse_id: int) -> list[Connector]:
        data = await self._get(f"/chargers/{station_id}/evses/{evse_id}/connectors")
        return _records(Connector, data)

    async def send_metering_configuration(self, station_id, config: MeteringConfiguration) -> dict:
        resp = await self._client.get(
            "/setvariables/create",
            params=config.to_query_params(station_id),
            headers={"Accept": "application/json"},
        )
        resp.raise_for_status()
        return resp.json()

    # Status mutations: no handler on the dashboard API yet
    async def update_station_status(self, station_id: int, status: str):
        await self._put(f"/chargers/{station_id}/status", {"status": status})

    async def update_evse_status(self, station_id: int, evse_id: int, status: str):
        await self._put(f"/chargers/{station_id}/evses/{evse_id}/status", {"status": status})

    async def update_ess_status(self, station_id: int, ess_id: int, status: str):
        await self._put(f"/chargers/{station_id}/ess/{ess_id}/status", {"status": status})
