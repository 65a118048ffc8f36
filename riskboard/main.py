import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from riskboard.core.config import settings
from riskboard.core.errors import AppError
from riskboard.db import registry  # noqa: F401
from riskboard.schemas.common import ErrorOut
from riskboard.api.routes.auth import router as auth_router
from riskboard.api.routes.clients import router as clients_router
from riskboard.api.routes.loans import router as loans_router
from riskboard.api.routes.payments import router as payments_router
from riskboard.api.routes.users import router as users_router
from riskboard.api.routes.dashboard import router as dashboard_router
from riskboard.api.routes.audit import router as audit_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("riskboard")

app = FastAPI(title="riskboard")

origins = [o.strip() for o in (settings.cors_origins or "").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, code: str, message: str, details=None, tb: str | None = None) -> JSONResponse:
    body = ErrorOut(error=code, message=message, details=details or None, traceback=tb)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        log.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.code, exc.message)
    return _error(exc.status_code, exc.code, exc.message, exc.details)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, str):
        return _error(exc.status_code, exc.detail, exc.detail.replace("_", " "))
    return _error(exc.status_code, "http_error", "Request failed", exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return _error(400, "validation_error", "Invalid request data", details)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    return _error(
        500,
        "internal_error",
        str(exc) if settings.debug else "Internal server error",
        tb=traceback.format_exc() if settings.debug else None,
    )


@app.get("/health")
@app.get("/api/health")
def health():
    return {"status": "ok"}


app.include_router(auth_router)
app.include_router(clients_router)
app.include_router(loans_router)
app.include_router(payments_router)
app.include_router(users_router)
app.include_router(dashboard_router)
app.include_router(audit_router)
