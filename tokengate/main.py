"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from tokengate.config import settings
from tokengate.database import create_db_and_tables, engine
from tokengate.exceptions import TokengateError
from tokengate.services.revocation import DatabaseRevocationList
from tokengate.utils.logging import setup_logging
from tokengate.api import auth, system
from tokengate.api.deps import close_ledger
from tokengate.api.errors import tokengate_error_handler, validation_error_handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    create_db_and_tables()
    DatabaseRevocationList(engine).purge_expired()

    yield

    await close_ledger()


app = FastAPI(
    title="Tokengate",
    description="Token-gated wallet authentication with HMAC-signed API access",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(TokengateError, tokengate_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

# Mount routers
app.include_router(auth.router)
app.include_router(system.router)
