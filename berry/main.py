"""
Berry Ledger: FastAPI application.

This is the entry point for the application.
All routers are registered here.
"""

import uvicorn
from fastapi import FastAPI

from berry.config import get_settings
from berry.logging import setup_logging
from berry.api.health import router as health_router
from berry.api.accounts import router as accounts_router
from berry.api.transactions import router as transactions_router

settings = get_settings()
setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="A double-entry ledger of accounts and transactions",
)

# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(transactions_router)


def run() -> None:
    """Start the HTTP server (console script ``berry-server``)."""
    uvicorn.run(
        "berry.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_config=None,
    )


if __name__ == "__main__":
    run()
