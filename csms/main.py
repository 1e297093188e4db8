import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from csms.api import router as api_router
from csms.api.auth_api import token_from_request
from csms.api.errors import GENERIC_ERROR, ApiError
from csms.auth.security import verify_access_token
from csms.database.database import DataAccessError, close_pool

# ==== Logging ====
QUIET_LOGGERS = ("httpx", "apscheduler", "sqlalchemy.engine", "uvicorn", "uvicorn.error")


def configure_logging():
    """Root level from LOG_LEVEL (WARNING by default); library loggers follow it."""
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "WARNING").upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(level)

    # One line per request is off unless asked for
    if os.getenv("ACCESS_LOG_DISABLED", "true").lower() == "true":
        access = logging.getLogger("uvicorn.access")
        access.handlers = []
        access.propagate = False
        access.disabled = True


configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="CSMS Dashboard API")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


# ============ Error envelope ============
@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(DataAccessError)
async def data_access_error_handler(request: Request, exc: DataAccessError):
    logger.error("Data access failed on %s: %s", request.url.path, exc)
    return JSONResponse({"error": GENERIC_ERROR}, status_code=500)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse({"error": GENERIC_ERROR}, status_code=500)


# ============ Simple auth gate (bearer header or cookie) ============
AUTH_REQUIRED = os.getenv("AUTH_REQUIRED", "true").lower() == "true"


@app.middleware("http")
async def auth_gate(request: Request, call_next):
    if not AUTH_REQUIRED:
        return await call_next(request)
    path = request.url.path
    # Allowlist for login and anything outside the API
    if path.startswith("/api/auth/") or not path.startswith("/api/") or request.method == "OPTIONS":
        return await call_next(request)

    username = verify_access_token(token_from_request(request))
    if not username:
        return JSONResponse({"error": "Not authenticated"}, status_code=401)
    request.state.user = username
    return await call_next(request)


@app.on_event("shutdown")
def shutdown_event():
    close_pool()
