"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import analytics, catalog, prices, snapshots, transactions, wallet_assets, wallets
from database import init_db
from logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Apply pending schema migrations on startup."""
    try:
        init_db()
    except Exception:
        logger.error("Database initialization failed on startup", exc_info=True)
        raise
    yield


app = FastAPI(
    title="Wallet Tracker",
    description="Personal wallets, live valuation and value history",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(wallets.router)
app.include_router(transactions.router)
app.include_router(wallet_assets.router)
app.include_router(snapshots.router)
app.include_router(analytics.router)
app.include_router(prices.router)
app.include_router(catalog.router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
