import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .db import VehicleStore, get_data_path
from .middleware.audit import register_audit_logging
from .routers import stats, vehicles, views
from .services.vehicles import VehicleService

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _cors_origins():
    raw = os.environ.get("CORS_ALLOW_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = VehicleStore(get_data_path()).load()
    app.state.vehicle_service = VehicleService(store)
    logger.info("fleet service ready with %d vehicles", len(store.vehicles))
    yield


app = FastAPI(title="Fleet Vehicle API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)
register_audit_logging(app)

app.include_router(vehicles.router)
app.include_router(stats.router)
app.include_router(views.router)

@app.get("/")
def root():
    return {"status": "ok"}

@app.get("/health")
def health():
    return {"ok": True}

@app.get("/__routes")
def list_routes():
    routes = []
    for r in app.routes:
        path = getattr(r, "path", None)
        if not path:
            # included-router entries carry no path of their own
            continue
        methods = getattr(r, "methods", None)
        routes.append({"path": path, "methods": sorted(methods or [])})
    return routes
