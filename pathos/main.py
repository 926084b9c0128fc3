"""Pathos FastAPI application entry point."""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pathos.auth import get_user_service
from pathos.db.connection import Database
from pathos.entries.router import get_entry_service
from pathos.entries.router import router as entries_router
from pathos.entries.service import EntryService
from pathos.errors import PathosError, UpstreamFailureError, ValidationError
from pathos.milestones.router import get_milestone_service
from pathos.milestones.router import router as milestones_router
from pathos.milestones.service import MilestoneService
from pathos.onboarding.router import get_onboarding_service
from pathos.onboarding.router import router as onboarding_router
from pathos.onboarding.service import OnboardingService
from pathos.passions.router import get_passion_service
from pathos.passions.router import router as passions_router
from pathos.passions.service import PassionService
from pathos.projects.router import get_project_service
from pathos.projects.router import router as projects_router
from pathos.projects.service import ProjectService
from pathos.tasks.router import get_task_service
from pathos.tasks.router import router as tasks_router
from pathos.tasks.service import TaskService
from pathos.time_entries.router import get_time_entry_service
from pathos.time_entries.router import router as time_entries_router
from pathos.time_entries.service import TimeEntryService
from pathos.users.router import router as users_router
from pathos.users.service import DEFAULT_BCRYPT_ROUNDS, UserService

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

# Settings come from the environment; a .env at the project root fills gaps
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


def install_services(
    app: FastAPI, db: Database, *, bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> None:
    """Build every service on one database and bind it to its router placeholder."""
    passions = PassionService(db)
    users = UserService(db, bcrypt_rounds=bcrypt_rounds)
    projects = ProjectService(db, passions)
    milestones = MilestoneService(db)
    tasks = TaskService(db)
    entries = EntryService(db)
    time_entries = TimeEntryService(db)
    onboarding = OnboardingService(db, passions)

    app.dependency_overrides[get_user_service] = lambda: users
    app.dependency_overrides[get_passion_service] = lambda: passions
    app.dependency_overrides[get_project_service] = lambda: projects
    app.dependency_overrides[get_milestone_service] = lambda: milestones
    app.dependency_overrides[get_task_service] = lambda: tasks
    app.dependency_overrides[get_entry_service] = lambda: entries
    app.dependency_overrides[get_time_entry_service] = lambda: time_entries
    app.dependency_overrides[get_onboarding_service] = lambda: onboarding


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage database lifecycle and service wiring."""
    logging.basicConfig(
        level=os.environ.get("PATHOS_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db = await Database.connect(os.environ.get("PATHOS_DB_PATH", "pathos.db"))
    install_services(app, db)

    if os.environ.get("PATHOS_SEED_PASSIONS", "1") != "0":
        await PassionService(db).seed_default_passions()

    app.state.db = db
    logger.info("Pathos %s started", VERSION)
    yield

    await db.close()


# -- Error rendering --


async def pathos_error_handler(request: Request, exc: PathosError) -> JSONResponse:
    content = {"error": exc.kind, "detail": exc.detail}
    if isinstance(exc, ValidationError):
        content["field"] = exc.field
    return JSONResponse(status_code=exc.status_code, content=content)


async def request_validation_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            # Drop the "body"/"query" location prefix
            "field": ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0]),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "validation_error", "detail": "Invalid request", "details": details},
    )


async def storage_error_handler(
    request: Request, exc: aiosqlite.OperationalError,
) -> JSONResponse:
    logger.error("Database failure on %s %s: %s", request.method, request.url.path, exc)
    return await pathos_error_handler(request, UpstreamFailureError("Database unavailable"))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "internal_error"})


app = FastAPI(
    title="Pathos",
    description="Track hobby projects: passions, projects, milestones, tasks, and time",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        origin.strip()
        for origin in os.environ.get("PATHOS_CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(PathosError, pathos_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(aiosqlite.OperationalError, storage_error_handler)
app.add_exception_handler(Exception, unexpected_error_handler)

app.include_router(users_router)
app.include_router(passions_router)
app.include_router(projects_router)
app.include_router(milestones_router)
app.include_router(tasks_router)
app.include_router(entries_router)
app.include_router(time_entries_router)
app.include_router(onboarding_router)


@app.get("/api/health")
async def health() -> dict:
    return {"status": "ok", "version": VERSION}
