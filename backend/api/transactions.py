"""Wallet transaction (ledger) API endpoints.

Every successful mutation is followed by a best-effort wallet snapshot
so the value chart reflects the change immediately.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload

from api.helpers import get_owned_wallet_or_404, get_snapshot_service
from database import get_db
from models import SnapshotReason, Transaction, Wallet
from schemas.transaction import TransactionCreate, TransactionResponse, TransactionUpdate
from services.snapshot_service import SnapshotService
from services.transaction_service import TransactionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/wallets/{wallet_id}/transactions", tags=["transactions"])


def _require_id(transaction_id: Optional[str]) -> str:
    if not transaction_id:
        raise HTTPException(status_code=400, detail="Missing id")
    return transaction_id


@router.get("", response_model=list[TransactionResponse])
def list_transactions(
    wallet: Wallet = Depends(get_owned_wallet_or_404),
    db: Session = Depends(get_db),
):
    """List the wallet's ledger, oldest first, with asset details."""
    return (
        db.query(Transaction)
        .options(joinedload(Transaction.asset))
        .filter(Transaction.wallet_id == wallet.id)
        .order_by(Transaction.executed_at.asc(), Transaction.created_at.asc())
        .all()
    )


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    data: TransactionCreate,
    wallet: Wallet = Depends(get_owned_wallet_or_404),
    snapshot_service: SnapshotService = Depends(get_snapshot_service),
    db: Session = Depends(get_db),
):
    """Append a BUY or SELL and record a TX_ADD snapshot."""
    try:
        tx = TransactionService.create_transaction(
            db,
            wallet.id,
            type=data.type,
            asset_id=data.asset_id,
            quantity=data.quantity,
            price_per_unit=data.price_per_unit,
            executed_at=data.executed_at,
            note=data.note,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    snapshot_service.record_snapshot(db, wallet.id, SnapshotReason.TX_ADD)
    db.refresh(tx)
    return tx


@router.put("", response_model=TransactionResponse)
def update_transaction(
    data: TransactionUpdate,
    transaction_id: Optional[str] = Query(None, alias="id"),
    wallet: Wallet = Depends(get_owned_wallet_or_404),
    snapshot_service: SnapshotService = Depends(get_snapshot_service),
    db: Session = Depends(get_db),
):
    """Edit quantity and unit price, then record a TX_EDIT snapshot."""
    transaction_id = _require_id(transaction_id)
    try:
        tx = TransactionService.update_transaction(
            db, wallet.id, transaction_id,
            quantity=data.quantity, price_per_unit=data.price_per_unit,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if tx is None:
        raise HTTPException(status_code=404, detail="Transaction not found")

    snapshot_service.record_snapshot(db, wallet.id, SnapshotReason.TX_EDIT)
    db.refresh(tx)
    return tx


@router.delete("")
def delete_transaction(
    transaction_id: Optional[str] = Query(None, alias="id"),
    wallet: Wallet = Depends(get_owned_wallet_or_404),
    snapshot_service: SnapshotService = Depends(get_snapshot_service),
    db: Session = Depends(get_db),
):
    """Delete a ledger entry and record a TX_DELETE snapshot."""
    transaction_id = _require_id(transaction_id)
    if not TransactionService.delete_transaction(db, wallet.id, transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")

    snapshot_service.record_snapshot(db, wallet.id, SnapshotReason.TX_DELETE)
    return {"ok": True}
