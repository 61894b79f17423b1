"""Wallet assets API endpoints (MAIN positions and OTHER items)."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from api.helpers import get_owned_wallet_or_404, get_snapshot_service
from database import get_db
from models import SnapshotReason, Wallet, WalletAssetKind
from schemas.wallet_asset import WalletAssetCreate, WalletAssetResponse
from services.snapshot_service import SnapshotService
from services.wallet_asset_service import WalletAssetService, parse_kind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/wallets/{wallet_id}/assets", tags=["wallet-assets"])


@router.get("", response_model=list[WalletAssetResponse])
def list_wallet_assets(
    kind: Optional[str] = Query(None, description="MAIN (default) or OTHER"),
    wallet: Wallet = Depends(get_owned_wallet_or_404),
    db: Session = Depends(get_db),
):
    """List wallet assets of one kind, newest first."""
    return WalletAssetService.list_assets(db, wallet.id, parse_kind(kind))


@router.post("", response_model=WalletAssetResponse)
def add_wallet_asset(
    data: WalletAssetCreate,
    response: Response,
    wallet: Wallet = Depends(get_owned_wallet_or_404),
    snapshot_service: SnapshotService = Depends(get_snapshot_service),
    db: Session = Depends(get_db),
):
    """Add a wallet asset.

    MAIN: merge into the wallet's row for the asset, append a BUY, and
    record a TX_ADD snapshot (200). OTHER: create a manually valued item
    (201); OTHER items do not trigger a snapshot.
    """
    kind = parse_kind(data.kind)
    try:
        if kind == WalletAssetKind.MAIN:
            row = WalletAssetService.add_main_asset(
                db, wallet.id, data.asset_id, data.amount, data.price_per_unit
            )
        else:
            row = WalletAssetService.create_other_asset(db, wallet.id, data.name, data.value)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if kind == WalletAssetKind.MAIN:
        snapshot_service.record_snapshot(db, wallet.id, SnapshotReason.TX_ADD)
        db.refresh(row)
    else:
        response.status_code = 201
    return row


@router.delete("")
def delete_wallet_asset(
    item_id: Optional[str] = Query(None, alias="id"),
    wallet: Wallet = Depends(get_owned_wallet_or_404),
    db: Session = Depends(get_db),
):
    """Remove a wallet asset row; the ledger is not changed."""
    if not item_id:
        raise HTTPException(status_code=400, detail="Missing id")
    if not WalletAssetService.delete_asset(db, wallet.id, item_id):
        raise HTTPException(status_code=404, detail="Asset not found")
    return {"ok": True}
