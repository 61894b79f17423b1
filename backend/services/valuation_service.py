"""Valuation engine: point-in-time value, cost basis, and allocation."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from models import Asset, AssetType, Wallet
from services.asset_service import AssetService
from services.holdings_service import (
    active_holdings,
    compute_invested,
    merge_holdings,
    resolve_holdings,
)
from services.price_service import PriceService, normalize_vs_currency
from services.transaction_service import TransactionService
from services.wallet_asset_service import WalletAssetService
from utils.money import ZERO, money_float, to_decimal

logger = logging.getLogger(__name__)

# Allocation bucket names, in response order.
BUCKET_CRYPTO = "Crypto"
BUCKET_STOCKS = "Stocks"
BUCKET_ETFS = "ETFs"
BUCKET_OTHER = "Other"

_BUCKET_BY_TYPE = {
    AssetType.CRYPTO.value: BUCKET_CRYPTO,
    AssetType.STOCK.value: BUCKET_STOCKS,
    AssetType.ETF.value: BUCKET_ETFS,
}


@dataclass
class AllocationSlice:
    """One allocation bucket with its share of the bucket total."""

    name: str
    value: Decimal
    percent: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "value": money_float(self.value),
            "percent": money_float(self.percent),
        }


@dataclass
class ValuationSummary:
    """Result of valuing one or more wallets at current prices."""

    main_value: Decimal = ZERO
    other_value: Decimal = ZERO
    invested: Decimal = ZERO
    allocation: list[AllocationSlice] = field(default_factory=list)
    priced_asset_count: int = 0
    unpriced_asset_ids: list[str] = field(default_factory=list)
    holdings: dict[str, Decimal] = field(default_factory=dict)

    @property
    def current_total_value(self) -> Decimal:
        return self.main_value + self.other_value

    @property
    def overall_pl(self) -> Decimal:
        """Unrealized P/L of market positions against capital deployed.

        OTHER items have no cost basis, so they are left out.
        """
        return self.main_value - self.invested


def allocation_percentages(values: Mapping[str, Decimal]) -> dict[str, Decimal]:
    """Each bucket's share of the sum of all buckets, in percent.

    When the sum is zero every share is zero.
    """
    total = sum(values.values(), ZERO)
    if total == 0:
        return {name: ZERO for name in values}
    return {name: value / total * 100 for name, value in values.items()}


def summarize_holdings(
    holdings: Mapping[str, Decimal],
    invested: Decimal,
    assets_by_id: Mapping[str, Asset],
    prices: Mapping[str, Decimal],
    other_values: Iterable,
) -> ValuationSummary:
    """Value already-resolved active holdings.

    A holding with no price contributes 0 and is reported in
    ``unpriced_asset_ids``. So is a holding outside the market buckets
    (CASH, or an asset missing from the catalog), which keeps the
    allocation buckets summing to the total value.
    """
    buckets: dict[str, Decimal] = {
        BUCKET_CRYPTO: ZERO,
        BUCKET_STOCKS: ZERO,
        BUCKET_ETFS: ZERO,
    }
    main_value = ZERO
    priced = 0
    unpriced: list[str] = []

    for asset_id in sorted(holdings):
        price = prices.get(asset_id)
        asset = assets_by_id.get(asset_id)
        bucket = _BUCKET_BY_TYPE.get(asset.type) if asset is not None else None
        if price is None or bucket is None:
            unpriced.append(asset_id)
            continue
        priced += 1
        value = holdings[asset_id] * price
        main_value += value
        buckets[bucket] += value

    other_value = ZERO
    for raw in other_values:
        value = to_decimal(raw)
        if value is not None:
            other_value += value
    buckets[BUCKET_OTHER] = other_value

    percents = allocation_percentages(buckets)
    allocation = [
        AllocationSlice(name=name, value=value, percent=percents[name])
        for name, value in buckets.items()
    ]

    if unpriced:
        logger.info("Valuation: %d holdings without a live price", len(unpriced))

    return ValuationSummary(
        main_value=main_value,
        other_value=other_value,
        invested=invested,
        allocation=allocation,
        priced_asset_count=priced,
        unpriced_asset_ids=unpriced,
        holdings=dict(holdings),
    )


def compute_valuation(
    transactions: Iterable,
    assets_by_id: Mapping[str, Asset],
    prices: Mapping[str, Decimal],
    other_values: Iterable,
    epsilon: Optional[Decimal] = None,
) -> ValuationSummary:
    """Value a single ledger plus its OTHER items.

    Args:
        transactions: Ledger rows (BUY/SELL).
        assets_by_id: Catalog rows for the ledger's assets.
        prices: Live price per asset id; missing ids count as unpriced.
        other_values: Signed values of OTHER wallet assets.
        epsilon: Dust threshold for open positions.
    """
    transactions = list(transactions)
    holdings = active_holdings(resolve_holdings(transactions), epsilon)
    return summarize_holdings(
        holdings, compute_invested(transactions), assets_by_id, prices, other_values
    )


class ValuationService:
    """Values wallets by combining the ledger, the catalog and live prices."""

    def __init__(self, price_service: Optional[PriceService] = None):
        self._price_service = price_service

    @property
    def price_service(self) -> PriceService:
        if self._price_service is None:
            self._price_service = PriceService()
        return self._price_service

    def value_wallets(
        self,
        db: Session,
        wallets: Iterable[Wallet],
        quote_currency: Optional[str],
    ) -> ValuationSummary:
        """Value several wallets as one portfolio.

        Holdings are resolved and filtered per wallet, then merged, so a
        short position in one wallet never cancels a long one in another.
        """
        per_wallet: list[dict[str, Decimal]] = []
        invested = ZERO
        other_values: list = []

        for wallet in wallets:
            transactions = TransactionService.list_transactions(db, wallet.id)
            per_wallet.append(active_holdings(resolve_holdings(transactions)))
            invested += compute_invested(transactions)
            other_values.extend(
                a.value for a in WalletAssetService.list_other_assets(db, wallet.id)
            )

        holdings = merge_holdings(*per_wallet)
        assets = AssetService.list_assets_by_ids(db, list(holdings))
        assets_by_id = {a.id: a for a in assets}
        prices = self.price_service.get_prices_for_assets(
            assets, normalize_vs_currency(quote_currency)
        )
        return summarize_holdings(holdings, invested, assets_by_id, prices, other_values)

    def value_wallet(self, db: Session, wallet: Wallet) -> ValuationSummary:
        """Value one wallet in its own currency."""
        return self.value_wallets(db, [wallet], wallet.currency)
