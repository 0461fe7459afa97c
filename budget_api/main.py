import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from budget_api.core.config import settings
from budget_api.core.errors import register_error_handlers
from budget_api.core.logging_config import configure_logging
from budget_api.db.base import Base
from budget_api.db.session import get_db, engine
from budget_api.routers import admin, analytics, budgets, categories, goals, transactions, users
from budget_api.services.identity import resolve_identity_provider

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Force database to create tables
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Credentials are resolved once per process; tests install their own provider
    if getattr(app.state, "identity", None) is None:
        app.state.identity = resolve_identity_provider(settings)
        logger.info("Identity provider ready (%s)", type(app.state.identity).__name__)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include our backend logic
app.include_router(users.router)
app.include_router(categories.router)
app.include_router(transactions.router)
app.include_router(budgets.router)
app.include_router(goals.router)
app.include_router(analytics.router)
app.include_router(admin.router)


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        return {"status": "online", "database": "connected"}
    except SQLAlchemyError as e:
        logger.error("Health check could not reach the database: %s", e)
        return {"status": "online", "database": "disconnected"}
