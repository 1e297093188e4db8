import logging
import os

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from csms.services.metering import forwarded_params

logger = logging.getLogger(__name__)

# Backend that actually talks to the stations
API_BASE_URL = (
    os.getenv("NEXT_PUBLIC_API_BASE_URL") or "http://localhost:8090"
).rstrip("/")
UPSTREAM_TIMEOUT = float(os.getenv("UPSTREAM_TIMEOUT", "10"))

router = APIRouter()


async def upstream_client():
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=UPSTREAM_TIMEOUT) as client:
        yield client


@router.get("/setvariables/create", tags=["configuration"])
async def create_set_variables(request: Request, client: httpx.AsyncClient = Depends(upstream_client)):
    """Forward a metering configuration to the backend and wrap its answer."""
    params = forwarded_params(request.query_params)
    logger.info("[API Proxy] setvariables request: %s", params)

    try:
        resp = await client.get(
            "/api/setvariables/create",
            params=params,
            headers={"Accept": "application/json"},
        )
        data = resp.json() if resp.is_success else None
    except (httpx.HTTPError, ValueError) as e:
        logger.error("[API Proxy] upstream call failed: %s", e)
        return JSONResponse(
            {"success": False, "message": "Failed to connect to upstream API", "error": str(e)},
            status_code=500,
        )

    if not resp.is_success:
        logger.error("[API Proxy] upstream error %s %s: %s", resp.status_code, resp.reason_phrase, resp.text)
        return JSONResponse(
            {
                "success": False,
                "message": f"Upstream API error: {resp.status_code} {resp.reason_phrase}",
                "details": resp.text,
            },
            status_code=resp.status_code,
        )

    logger.info("[API Proxy] upstream response: %s", data)
    return {"success": True, "data": data, "message": "Configuration sent successfully"}
