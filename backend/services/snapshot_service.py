"""Snapshot store: append-only wallet value observations.

Snapshots are taken after every ledger mutation (TX_ADD, TX_EDIT,
TX_DELETE) and at most once per local calendar day on read (EOD). The
reference timezone for "day" is settings.SNAPSHOT_TIMEZONE.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from config import settings
from models import SnapshotReason, Wallet, WalletSnapshot, utc_now
from services.valuation_service import ValuationService
from utils.day_keys import local_date
from utils.money import round_money

logger = logging.getLogger(__name__)


class SnapshotService:
    """Creates and reads wallet snapshots.

    The clock and the day-bucketing timezone are injectable so tests can
    pin "now" and exercise DST boundaries.
    """

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

    def now(self) -> datetime:
        return self._clock()

    def append_snapshot(
        self,
        db: Session,
        wallet_id: str,
        value: Decimal,
        currency: str,
        reason: SnapshotReason | str,
    ) -> WalletSnapshot:
        """Persist one snapshot row stamped with the injected clock."""
        snapshot = WalletSnapshot(
            wallet_id=wallet_id,
            value=round_money(value),
            currency=currency,
            reason=SnapshotReason(reason).value,
            created_at=self.now(),
        )
        db.add(snapshot)
        db.commit()
        db.refresh(snapshot)
        return snapshot

    def create_snapshot(
        self, db: Session, wallet_id: str, reason: SnapshotReason | str
    ) -> WalletSnapshot:
        """Value the wallet at live prices and append a snapshot.

        The value is priced holdings plus OTHER items, in the wallet's
        currency. It can be negative when debts outweigh assets.

        Raises:
            LookupError: If the wallet does not exist
        """
        wallet = db.query(Wallet).filter(Wallet.id == wallet_id).first()
        if wallet is None:
            raise LookupError(f"Wallet not found: {wallet_id}")

        summary = self.valuation_service.value_wallet(db, wallet)
        snapshot = self.append_snapshot(
            db, wallet.id, summary.current_total_value, wallet.currency, reason
        )
        logger.info(
            "Snapshot %s for wallet %s: %s %s (%d priced, %d unpriced)",
            snapshot.reason, wallet_id, snapshot.value, snapshot.currency,
            summary.priced_asset_count, len(summary.unpriced_asset_ids),
        )
        return snapshot

    def record_snapshot(
        self, db: Session, wallet_id: str, reason: SnapshotReason | str
    ) -> WalletSnapshot | None:
        """Best-effort :meth:`create_snapshot` used after ledger mutations.

        The mutation has already been committed; a failure here is logged
        and the session rolled back, never raised.
        """
        try:
            return self.create_snapshot(db, wallet_id, reason)
        except Exception:
            db.rollback()
            logger.warning(
                "Snapshot %s for wallet %s failed",
                getattr(reason, "value", reason),
                wallet_id,
                exc_info=True,
            )
            return None

    def latest_snapshot(
        self, db: Session, wallet_id: str, reason: SnapshotReason | None = None
    ) -> WalletSnapshot | None:
        query = db.query(WalletSnapshot).filter(WalletSnapshot.wallet_id == wallet_id)
        if reason is not None:
            query = query.filter(WalletSnapshot.reason == reason.value)
        return query.order_by(
            WalletSnapshot.created_at.desc(), WalletSnapshot.id.desc()
        ).first()

    def ensure_daily_snapshot(self, db: Session, wallet_id: str) -> bool:
        """Create today's EOD snapshot unless one already exists.

        "Today" is the current calendar date in the reference timezone.
        Two concurrent callers may both create one; readers take the last
        value per day, so a duplicate is harmless.

        Returns:
            True if a snapshot was created
        """
        latest = self.latest_snapshot(db, wallet_id, SnapshotReason.EOD)
        today = local_date(self.now(), self.tz)
        if latest is not None and local_date(latest.created_at, self.tz) == today:
            return False

        self.create_snapshot(db, wallet_id, SnapshotReason.EOD)
        return True

    def list_snapshots(
        self,
        db: Session,
        wallet_id: str,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> list[WalletSnapshot]:
        """Snapshots in insertion order, optionally from ``since`` onwards.

        With ``limit``, the most recent ``limit`` rows are returned, still
        oldest first.
        """
        query = db.query(WalletSnapshot).filter(WalletSnapshot.wallet_id == wallet_id)
        if since is not None:
            query = query.filter(WalletSnapshot.created_at >= since)

        if limit is None:
            return query.order_by(
                WalletSnapshot.created_at.asc(), WalletSnapshot.id.asc()
            ).all()

        rows = (
            query.order_by(WalletSnapshot.created_at.desc(), WalletSnapshot.id.desc())
            .limit(limit)
            .all()
        )
        rows.reverse()
        return rows
