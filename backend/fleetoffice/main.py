"""FastAPI application entry point."""
import logging

from fastapi import FastAPI

from . import models
from .config import get_settings
from .database import AsyncSessionLocal, engine
from .error_handlers import add_exception_handlers
from .logging_config import configure_logging
from .routers import (
    assignments,
    bookings,
    compliance,
    contracts,
    correspondence,
    dashboard,
    documents,
    employees,
    employments,
    expenses,
    fuel,
    maintenance,
    payslips,
    registry,
    vehicles,
)
from .services.maintenance import seed_task_types

logger = logging.getLogger(__name__)

app = FastAPI(title="Fleet Office Backend", version="0.1.0")
add_exception_handlers(app)

app.include_router(employees.router)
app.include_router(employees.roles_router)
app.include_router(employments.router)
app.include_router(vehicles.router)
app.include_router(assignments.router)
app.include_router(bookings.router)
app.include_router(maintenance.router)
app.include_router(maintenance.task_types_router)
app.include_router(maintenance.tasks_router)
app.include_router(fuel.cards_router)
app.include_router(fuel.refuels_router)
app.include_router(registry.suppliers_router)
app.include_router(registry.projects_router)
app.include_router(expenses.router)
app.include_router(payslips.router)
app.include_router(contracts.contracts_router)
app.include_router(contracts.insurances_router)
app.include_router(correspondence.router)
app.include_router(compliance.categories_router)
app.include_router(compliance.items_router)
app.include_router(documents.router)
app.include_router(dashboard.router)


@app.on_event("startup")
async def on_startup() -> None:
    """Configure logging, ensure database tables exist and seed default task types."""

    settings = get_settings()
    configure_logging(settings.log_level)
    async with engine.begin() as conn:
        await conn.run_sync(models.Base.metadata.create_all)
    async with AsyncSessionLocal() as session:
        await seed_task_types(session)
    logger.info("Fleet office backend started (upload root: %s)", settings.upload_root)


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    """Simple readiness probe for uptime checks."""

    return {"status": "ok"}
