"""Router aggregation: every feature router is mounted under ``/api``."""

from fastapi import FastAPI

from . import budgets, categories, recurring, summary, transactions


def register_routers(app: FastAPI) -> None:
    """Attach all API routes to the FastAPI application."""

    app.include_router(categories.router, prefix="/api")
    app.include_router(transactions.router, prefix="/api")
    app.include_router(budgets.router, prefix="/api")
    app.include_router(recurring.router, prefix="/api")
    app.include_router(summary.router, prefix="/api")
