from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from nexus.api.deps import get_prospector
from nexus.api.routes import leads_router
from nexus.config import settings
from nexus.services.store import StoreConfigError, TransportError


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initial load, like opening the dashboard
    try:
        await get_prospector().refresh()
    except StoreConfigError as e:
        logger.error(f"Store is not configured: {e}")
    yield


app = FastAPI(
    title=f"{settings.app_name} API",
    description="Lead prospecting and enrichment dashboard",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(leads_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request body validation errors."""
    details = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        details.append({"field": field, "message": error["msg"]})

    return JSONResponse(
        status_code=400,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Invalid request body",
            "details": details,
        },
    )


@app.exception_handler(StoreConfigError)
async def store_config_exception_handler(request: Request, exc: StoreConfigError):
    return JSONResponse(
        status_code=503,
        content={"error": "STORE_NOT_CONFIGURED", "message": str(exc)},
    )


@app.exception_handler(TransportError)
async def store_transport_exception_handler(request: Request, exc: TransportError):
    logger.error(f"Store request failed: {exc}")
    return JSONResponse(
        status_code=502,
        content={"error": "STORE_ERROR", "message": str(exc)},
    )


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
