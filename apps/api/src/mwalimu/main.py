"""
Mwalimu API entry point.

Builds the FastAPI application. The lifespan owns every long-lived client
(database engine, Redis, Gemini, job scheduler); each one is created on
startup, handed to the services that need it and parked on app.state, where
request dependencies pick it up.

Run with:
    uvicorn mwalimu.main:app --app-dir apps/api/src --reload
"""

import logging
from collections.abc import Awaitable
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from mwalimu import __version__
from mwalimu.api import api_router
from mwalimu.core.config import Settings, settings
from mwalimu.core.database import Database
from mwalimu.core.rate_limit import RateLimiter
from mwalimu.core.redis import close_redis, create_redis
from mwalimu.core.scheduler import JobScheduler
from mwalimu.modules.assistant import AssistantService
from mwalimu.modules.dashboard import DashboardService
from mwalimu.modules.schools import SchoolRegistry, register_school_jobs
from mwalimu.modules.schools.repository import SqlAlchemySchoolStore

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


async def _startup_step(name: str, step: Awaitable, config: Settings):
    """Await one startup step, tolerating failure outside production."""
    try:
        result = await step
    except Exception as e:
        print(f"[FAIL] {name}: {e}")
        if config.is_production:
            raise
        return None
    print(f"[OK] {name}")
    return result


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: Settings = app.state.settings
    print(f"Starting Mwalimu API ({config.python_env})...")

    # Rate limiting keeps working per process without Redis
    redis = await _startup_step("Redis", create_redis(config), config)
    app.state.rate_limiter = RateLimiter(redis)

    database = Database.from_settings(config)
    await _startup_step("Database", database.ping(), config)
    app.state.database = database
    app.state.school_registry = SchoolRegistry(SqlAlchemySchoolStore(database.session_maker))

    app.state.dashboard = DashboardService()
    app.state.assistant = AssistantService.from_settings(config)

    jobs = JobScheduler()
    register_school_jobs(jobs, database.session_maker)
    try:
        jobs.start()
        print(f"[OK] Scheduler ({len(jobs.job_ids)} job(s))")
    except Exception as e:
        print(f"[FAIL] Scheduler: {e}")
        if config.is_production:
            raise
    app.state.jobs = jobs

    yield

    print("Shutting down Mwalimu API...")
    jobs.shutdown()
    await close_redis(redis)
    await database.close()
    print("[OK] Shutdown complete")


debug_router = APIRouter(prefix="/debug", tags=["Debug"])


@debug_router.get("/jobs")
async def list_jobs(request: Request):
    """List background jobs and when they next run."""
    return {"jobs": request.app.state.jobs.describe()}


@debug_router.post("/jobs/{job_id}/trigger")
async def trigger_job(job_id: str, request: Request):
    """
    Run a background job now (e.g. schools_report_duplicates).

    Raises:
        HTTPException 404: If no such job is registered
    """
    jobs: JobScheduler = request.app.state.jobs
    try:
        return await jobs.run_now(job_id)
    except KeyError as e:
        raise HTTPException(
            status_code=404,
            detail={"error": "JOB_NOT_FOUND", "message": f"Unknown job '{job_id}'. Jobs: {jobs.job_ids}"},
        ) from e


def create_app(config: Settings = settings) -> FastAPI:
    """Build the application for the given settings."""
    application = FastAPI(
        title="Mwalimu API",
        description="Education dashboards for county officers, school heads, teachers and students",
        version=__version__,
        docs_url="/docs" if config.is_development else None,
        redoc_url="/redoc" if config.is_development else None,
        lifespan=lifespan,
    )
    application.state.settings = config

    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(api_router, prefix="/api/v1")
    if config.is_development:
        application.include_router(debug_router)

    @application.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        return {"service": "mwalimu-api", "version": __version__, "environment": config.python_env}

    @application.get("/health", tags=["Health"])
    async def health() -> dict[str, str]:
        """Liveness check."""
        return {"status": "healthy"}

    @application.get("/ready", tags=["Health"])
    async def ready(request: Request) -> dict[str, str]:
        """Readiness check; fails while the database is unreachable."""
        try:
            await request.app.state.database.ping()
        except Exception as e:
            raise HTTPException(status_code=503, detail={"error": "NOT_READY", "message": str(e)}) from e
        return {"status": "ready"}

    return application


app = create_app()
