from typing import Optional

from csms.database.database import test_connection

GENERIC_ERROR = "데이터를 가져오는데 실패했습니다."
DB_UNAVAILABLE = "데이터베이스 연결에 실패했습니다."


class ApiError(Exception):
    """Rendered by the application as ``{"error": message}`` with ``status_code``."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def parse_id(raw: str, label: str = "ID") -> int:
    try:
        return int(raw.strip())
    except (ValueError, AttributeError):
        raise ApiError(400, f"유효하지 않은 {label}입니다.")


def parse_limit(raw: Optional[str], default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        limit = int(raw)
    except ValueError:
        limit = 0
    if limit < 1:
        raise ApiError(400, "limit must be a positive integer")
    return limit


def require_store():
    if not test_connection():
        raise ApiError(500, DB_UNAVAILABLE)
