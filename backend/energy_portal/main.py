from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from energy_portal import __version__
from energy_portal.config import settings
from energy_portal.api import buildings, cities, compliance, cron, energy


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting application...")
    scheduler = None
    if settings.run_scheduler_in_api:
        from energy_portal.worker import setup_scheduler

        scheduler = setup_scheduler()
        scheduler.start()
        logger.info("Alert, summary and compliance jobs scheduled in the API process")

    yield
    # Shutdown
    logger.info("Shutting down application...")
    if scheduler:
        scheduler.shutdown()


app = FastAPI(
    title="Building Energy Compliance Portal",
    description="Temperature swing alerts, compliance photo tracking and degree-day energy savings",
    version=__version__,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(cities.router, prefix="/api/cities", tags=["Cities"])
app.include_router(buildings.router, prefix="/api/buildings", tags=["Buildings"])
app.include_router(energy.router, prefix="/api/energy", tags=["Energy"])
app.include_router(compliance.router, prefix="/api/compliance", tags=["Compliance"])
app.include_router(cron.router, prefix="/api/cron", tags=["Cron"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": __version__}


@app.get("/")
async def root():
    return {"message": "Building Energy Compliance Portal API", "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("energy_portal.main:app", host=settings.api_host, port=settings.api_port)
