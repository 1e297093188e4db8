"""State behind the monitoring dashboard: charger buckets, search, counters."""
import enum
import logging
import math
import os
from datetime import datetime, timezone
from typing import Optional

import httpx
from pydantic import ValidationError

from csms.client.csms_client import CsmsClient
from csms.models.models import Charger
from csms.services.charger_source import fixture_chargers

logger = logging.getLogger(__name__)

REFRESH_INTERVAL_SECONDS = 900
COUNTDOWN_START = 900

BUCKETS = ("normal", "disconnected")
FILTER_FIELDS = ("city", "district", "sub_district")


class FallbackPolicy(enum.Enum):
    FIXTURES = "fixtures"   # show the fallback records
    KEEP = "keep"           # keep whatever was shown before


DASHBOARD_FALLBACK = FallbackPolicy(os.getenv("DASHBOARD_FALLBACK", "fixtures").lower())


def fallback_chargers(now: Optional[datetime] = None) -> list[Charger]:
    """Two normal stations and one disconnected one."""
    return fixture_chargers(now)[:3]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def compute_operational_rate(normal: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(normal / total * 100)


def partition(chargers: list[Charger]) -> tuple[list[Charger], list[Charger]]:
    """Split into (normal, disconnected); any other status lands in neither."""
    normal = [c for c in chargers if c.status == "normal"]
    disconnected = [c for c in chargers if c.status == "disconnected"]
    return normal, disconnected


class DashboardViewModel:
    def __init__(self, client: CsmsClient, fallback_policy: FallbackPolicy = DASHBOARD_FALLBACK):
        self.client = client
        self.fallback_policy = fallback_policy

        self.normal: list[Charger] = []
        self.disconnected: list[Charger] = []
        self.fetched_count = 0
        self.last_updated: Optional[datetime] = None
        self.countdown = COUNTDOWN_START
        self.is_loading = False
        self.used_fallback = False

        self.search_terms = {bucket: "" for bucket in BUCKETS}
        self.filters = {field: "" for field in FILTER_FIELDS}

    # ==========================
    # Refresh
    # ==========================
    async def refresh(self):
        """Fetch the charger list. Failures never propagate; the fallback policy applies."""
        self.is_loading = True
        try:
            chargers = await self.client.get_dashboard_chargers()
            self._apply(chargers)
            self.used_fallback = False
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            logger.error("Charger fetch failed: %s", e)
            if self.fallback_policy is FallbackPolicy.FIXTURES:
                self._apply(fallback_chargers())
            self.used_fallback = True
        finally:
            self.last_updated = datetime.now(timezone.utc)
            self.countdown = COUNTDOWN_START
            self.is_loading = False

    async def manual_refresh(self) -> bool:
        """Refresh unless one is already running. Returns whether a fetch happened."""
        if self.is_loading:
            return False
        await self.refresh()
        return True

    def _apply(self, chargers: list[Charger]):
        self.normal, self.disconnected = partition(chargers)
        self.fetched_count = len(chargers)

    def tick(self):
        if self.countdown > 0:
            self.countdown -= 1

    @property
    def countdown_display(self) -> str:
        minutes, seconds = divmod(self.countdown, 60)
        return f"{minutes:02d}:{seconds:02d}"

    # ==========================
    # Search and filters
    # ==========================
    def set_search(self, bucket: str, value: str):
        if bucket not in BUCKETS:
            raise ValueError(f"unknown bucket {bucket!r}")
        self.search_terms[bucket] = value

    def set_filter(self, field: str, value: str):
        if field not in FILTER_FIELDS:
            raise ValueError(f"unknown filter {field!r}")
        self.filters[field] = value

    def _matches(self, charger: Charger, term: str) -> bool:
        term = term.lower()
        search_match = (
            term in charger.name.lower()
            or term in charger.location.lower()
            or term in charger.id.lower()
        )
        filter_match = all(
            not value or value in charger.location for value in self.filters.values()
        )
        return search_match and filter_match

    def filtered(self, bucket: str) -> list[Charger]:
        records = self.normal if bucket == "normal" else self.disconnected
        term = self.search_terms[bucket]
        return [c for c in records if self._matches(c, term)]

    # ==========================
    # Aggregates
    # ==========================
    @property
    def normal_count(self) -> int:
        return len(self.normal)

    @property
    def disconnected_count(self) -> int:
        return len(self.disconnected)

    @property
    def total_count(self) -> int:
        return self.normal_count + self.disconnected_count

    @property
    def operational_rate(self) -> int:
        return compute_operational_rate(self.normal_count, self.total_count)

    def summary(self) -> dict:
        return {
            "total": self.total_count,
            "normal": self.normal_count,
            "disconnected": self.disconnected_count,
            "operational_rate": self.operational_rate,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "next_refresh_in": self.countdown_display,
            "fallback": self.used_fallback,
        }
