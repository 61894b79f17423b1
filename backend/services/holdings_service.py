"""Holdings resolver: replays a transaction ledger into net quantities."""

import logging
from decimal import Decimal
from typing import Iterable, Protocol

from config import settings
from models import TransactionType
from utils.money import ZERO, to_decimal

logger = logging.getLogger(__name__)


class LedgerEntry(Protocol):
    """The transaction fields the resolver reads (ORM rows satisfy this)."""

    asset_id: str | None
    type: str
    quantity: Decimal
    price_per_unit: Decimal


def _sign(tx_type: str) -> int | None:
    if tx_type == TransactionType.BUY.value:
        return 1
    if tx_type == TransactionType.SELL.value:
        return -1
    return None


def resolve_holdings(transactions: Iterable[LedgerEntry]) -> dict[str, Decimal]:
    """Fold a ledger into net signed quantity per asset.

    BUY adds its quantity, SELL subtracts it. Rows with a missing asset
    reference, an unknown type, or a non-finite quantity are skipped.
    Decimal addition is exact, so the result does not depend on the
    order of ``transactions``.

    Returns:
        Dict mapping asset_id to net quantity (may be zero or negative).
    """
    holdings: dict[str, Decimal] = {}
    skipped = 0
    for tx in transactions:
        qty = to_decimal(tx.quantity)
        sign = _sign(tx.type)
        if qty is None or sign is None or not tx.asset_id:
            skipped += 1
            continue
        holdings[tx.asset_id] = holdings.get(tx.asset_id, ZERO) + sign * qty

    if skipped:
        logger.info("Holdings: skipped %d ledger entries with missing asset or quantity", skipped)
    return holdings


def active_holdings(
    holdings: dict[str, Decimal], epsilon: Decimal | None = None
) -> dict[str, Decimal]:
    """Keep only open long positions.

    A position is open when its net quantity is greater than ``epsilon``
    (default settings.HOLDING_EPSILON); residual dust and net-short
    positions count as closed.
    """
    if epsilon is None:
        epsilon = Decimal(str(settings.HOLDING_EPSILON))
    return {asset_id: qty for asset_id, qty in holdings.items() if qty > epsilon}


def merge_holdings(*holdings_maps: dict[str, Decimal]) -> dict[str, Decimal]:
    """Sum several asset_id -> quantity maps."""
    merged: dict[str, Decimal] = {}
    for holdings in holdings_maps:
        for asset_id, qty in holdings.items():
            merged[asset_id] = merged.get(asset_id, ZERO) + qty
    return merged


def compute_invested(transactions: Iterable[LedgerEntry]) -> Decimal:
    """Cumulative capital deployed: sum of quantity x price over BUYs.

    SELL transactions do not reduce this figure. It is not a lot-matched
    remaining cost basis, so P/L after partial sells is approximate.
    """
    invested = ZERO
    for tx in transactions:
        if tx.type != TransactionType.BUY.value or not tx.asset_id:
            continue
        qty = to_decimal(tx.quantity)
        price = to_decimal(tx.price_per_unit)
        if qty is None or price is None:
            continue
        invested += qty * price
    return invested
