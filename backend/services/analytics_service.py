"""Portfolio analytics: current totals, allocation, and daily value series."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Iterable, Mapping, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from config import settings
from models import WalletSnapshot, utc_now
from services.price_service import normalize_vs_currency
from services.valuation_service import ValuationService, ValuationSummary
from services.wallet_service import WalletService
from utils.day_keys import build_day_keys, day_key, local_date, start_of_local_day_utc
from utils.money import ZERO, to_decimal

logger = logging.getLogger(__name__)


@dataclass
class AnalyticsSummary:
    """Everything the dashboard shows for one user."""

    quote_currency: str
    valuation: ValuationSummary
    time_series: list[tuple[str, Decimal]] = field(default_factory=list)
    updated_at: Optional[datetime] = None


def last_value_per_day(
    snapshots: Iterable[WalletSnapshot], tz: ZoneInfo
) -> dict[str, Decimal]:
    """Bucket snapshots by local day, keeping the last value of each day.

    ``snapshots`` must be in insertion order. Rows with a non-finite
    value are skipped.
    """
    by_day: dict[str, Decimal] = {}
    for snap in snapshots:
        value = to_decimal(snap.value)
        if value is None:
            continue
        by_day[day_key(snap.created_at, tz)] = value
    return by_day


def carry_forward_series(
    day_keys: list[str],
    daily_values: Mapping[str, Mapping[str, Decimal]],
    seeds: Optional[Mapping[str, Decimal]] = None,
) -> list[tuple[str, Decimal]]:
    """Sum per-wallet values for each day, carrying the last known value.

    Args:
        day_keys: Ordered days to emit.
        daily_values: wallet_id -> (day key -> value observed that day).
        seeds: wallet_id -> value known before the first day. Wallets
            without a seed count as 0 until their first observation.

    Returns:
        List of (day key, total) in ``day_keys`` order.
    """
    carried: dict[str, Decimal] = dict(seeds or {})
    series: list[tuple[str, Decimal]] = []
    for day in day_keys:
        for wallet_id, by_day in daily_values.items():
            if day in by_day:
                carried[wallet_id] = by_day[day]
        series.append((day, sum(carried.values(), ZERO)))
    return series


class AnalyticsService:
    """Builds dashboard analytics from live valuation and stored snapshots."""

    def __init__(
        self,
        valuation_service: Optional[ValuationService] = None,
        clock: Callable[[], datetime] = utc_now,
        tz: Optional[ZoneInfo] = None,
    ):
        self._valuation_service = valuation_service
        self._clock = clock
        self.tz = tz or ZoneInfo(settings.SNAPSHOT_TIMEZONE)

    @property
    def valuation_service(self) -> ValuationService:
        if self._valuation_service is None:
            self._valuation_service = ValuationService()
        return self._valuation_service

    def _window_start(self, window_days: int) -> tuple[datetime, list[str]]:
        today = local_date(self._clock(), self.tz)
        start_day = today - timedelta(days=window_days)
        return start_of_local_day_utc(start_day, self.tz), build_day_keys(today, window_days)

    def _seed_value(self, db: Session, wallet_id: str, before: datetime) -> Decimal | None:
        """Value of the last snapshot taken before ``before``, if any."""
        snap = (
            db.query(WalletSnapshot)
            .filter(WalletSnapshot.wallet_id == wallet_id, WalletSnapshot.created_at < before)
            .order_by(WalletSnapshot.created_at.desc(), WalletSnapshot.id.desc())
            .first()
        )
        return to_decimal(snap.value) if snap is not None else None

    def _series_for_wallets(
        self, db: Session, wallet_ids: list[str], window_days: int
    ) -> list[tuple[str, Decimal]]:
        start_utc, day_keys = self._window_start(window_days)

        rows = (
            db.query(WalletSnapshot)
            .filter(
                WalletSnapshot.wallet_id.in_(wallet_ids),
                WalletSnapshot.created_at >= start_utc,
            )
            .order_by(WalletSnapshot.created_at.asc(), WalletSnapshot.id.asc())
            .all()
        )
        grouped: dict[str, list[WalletSnapshot]] = {wid: [] for wid in wallet_ids}
        for row in rows:
            grouped[row.wallet_id].append(row)

        daily = {wid: last_value_per_day(snaps, self.tz) for wid, snaps in grouped.items()}
        seeds: dict[str, Decimal] = {}
        for wid in wallet_ids:
            seed = self._seed_value(db, wid, start_utc)
            if seed is not None:
                seeds[wid] = seed

        return carry_forward_series(day_keys, daily, seeds)

    def get_wallet_series(
        self, db: Session, wallet_id: str, window_days: Optional[int] = None
    ) -> list[tuple[str, Decimal]]:
        """Carried-forward daily value series for a single wallet."""
        window_days = window_days or settings.ANALYTICS_WINDOW_DAYS
        return self._series_for_wallets(db, [wallet_id], window_days)

    def get_summary(
        self,
        db: Session,
        user_id: str,
        quote_currency: Optional[str] = None,
        window_days: Optional[int] = None,
    ) -> AnalyticsSummary:
        """Current totals plus a daily series summed across the user's wallets.

        Stored snapshots keep the currency each wallet had when they were
        taken; values are summed as recorded.
        """
        vs = normalize_vs_currency(quote_currency)
        window_days = window_days or settings.ANALYTICS_WINDOW_DAYS
        wallets = WalletService.list_wallets(db, user_id)

        valuation = self.valuation_service.value_wallets(db, wallets, vs)
        series: list[tuple[str, Decimal]] = []
        if wallets:
            series = self._series_for_wallets(db, [w.id for w in wallets], window_days)

        logger.debug(
            "Analytics for user %s: %d wallets, %d series points",
            user_id, len(wallets), len(series),
        )
        return AnalyticsSummary(
            quote_currency=vs,
            valuation=valuation,
            time_series=series,
            updated_at=self._clock(),
        )
