# 📦 main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import start_http_server
import structlog
import uvicorn

from api.handlers import router as api_router
from engine.matcher import load_weight_profiles
from settings import get_settings

log = structlog.get_logger()

settings = get_settings()


# ─────────────────────────────
# Startup
@asynccontextmanager
async def lifespan(app: FastAPI):
    profiles = load_weight_profiles()
    log.info("Weight profiles loaded", profiles=sorted(profiles), active=settings.weights_profile)
    if settings.prometheus_port:
        start_http_server(settings.prometheus_port)
        log.info("Prometheus exporter started", port=settings.prometheus_port)
    yield


# ─────────────────────────────
# API Setup
app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)
app.include_router(api_router)

# ─────────────────────────────
# Main entrypoint
if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
    )
