"""API route handlers."""
from . import analytics, catalog, prices, snapshots, transactions, wallet_assets, wallets

__all__ = [
    "analytics",
    "catalog",
    "prices",
    "snapshots",
    "transactions",
    "wallet_assets",
    "wallets",
]
