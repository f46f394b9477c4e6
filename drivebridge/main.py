import logging
import re

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Mount

from drivebridge.config import get_settings
from drivebridge.exceptions import DriveBridgeError, InvalidRequestError
from drivebridge.mcp_server import mcp
from drivebridge.models.common import ErrorResponse, StatusResponse
from drivebridge.routers.drive import router as drive_router
from drivebridge.services import drive as drive_service

logger = logging.getLogger(__name__)


# --- Localhost-only middleware ---

class LocalhostOnlyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        client_host = request.client.host if request.client else None
        if client_host not in ("127.0.0.1", "::1", "localhost"):
            return JSONResponse(
                status_code=403,
                content={"code": "FORBIDDEN", "message": "Localhost access only", "status": 403},
            )
        return await call_next(request)


# --- FastAPI app ---

api = FastAPI(title="Drivebridge", version="0.1.0")
api.include_router(drive_router)


@api.get("/api/status")
def api_status() -> StatusResponse:
    initialized = drive_service.get_client().credentials.is_set()
    return StatusResponse(
        initialized=initialized,
        message="Ready" if initialized else "Call /api/drive/initialize with an access token first",
    )


# --- Exception handlers ---

@api.exception_handler(DriveBridgeError)
async def drive_error_handler(request: Request, exc: DriveBridgeError):
    return JSONResponse(
        status_code=exc.status,
        content=ErrorResponse(code=exc.code, message=exc.message, status=exc.status).model_dump(),
    )


@api.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests as MISSING_<FIELD> / INVALID_<FIELD> errors."""
    error = exc.errors()[0]
    loc = error.get("loc", ())
    field = str(loc[-1]) if len(loc) > 1 else "body"
    field = re.sub(r"(?<!^)(?=[A-Z])", "_", field).lower()
    if error.get("type") == "missing":
        err = InvalidRequestError(f"{field} is required", code=f"MISSING_{field.upper()}")
    else:
        err = InvalidRequestError(f"{field}: {error.get('msg', 'invalid value')}", code=f"INVALID_{field.upper()}")
    return await drive_error_handler(request, err)


# --- Starlette root app ---

mcp_app = mcp.http_app(path="/", stateless_http=True)

app = Starlette(
    middleware=[Middleware(LocalhostOnlyMiddleware)],
    routes=[
        Mount("/mcp", app=mcp_app),
        Mount("/", app=api),
    ],
    lifespan=mcp_app.lifespan,
)


def run():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting drivebridge on %s:%d", settings.host, settings.port)
    uvicorn.run(
        "drivebridge.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
