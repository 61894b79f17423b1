"""Wallets API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.helpers import (
    allocation_response,
    ensure_daily_snapshot_quietly,
    get_current_user_id,
    get_owned_wallet_or_404,
    get_snapshot_service,
    get_valuation_service,
)
from database import get_db
from models import Wallet
from schemas.analytics import WalletValuationResponse
from schemas.wallet import WalletCreate, WalletResponse, WalletUpdate
from services.snapshot_service import SnapshotService
from services.valuation_service import ValuationService
from services.wallet_service import WalletService
from utils.money import money_float

router = APIRouter(prefix="/api/wallets", tags=["wallets"])


@router.get("", response_model=list[WalletResponse])
def list_wallets(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List the caller's wallets."""
    return WalletService.list_wallets(db, user_id)


@router.post("", response_model=WalletResponse, status_code=201)
def create_wallet(
    data: WalletCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create a wallet for the caller."""
    try:
        return WalletService.create_wallet(db, user_id, data.name, data.currency)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{wallet_id}", response_model=WalletResponse)
def get_wallet(
    wallet: Wallet = Depends(get_owned_wallet_or_404),
    snapshot_service: SnapshotService = Depends(get_snapshot_service),
    db: Session = Depends(get_db),
):
    """Get a wallet; opening it records today's EOD snapshot if missing."""
    ensure_daily_snapshot_quietly(snapshot_service, db, wallet.id)
    db.refresh(wallet)
    return wallet


@router.patch("/{wallet_id}", response_model=WalletResponse)
def update_wallet(
    data: WalletUpdate,
    wallet: Wallet = Depends(get_owned_wallet_or_404),
    db: Session = Depends(get_db),
):
    """Rename a wallet or change its currency. Omitted fields are kept."""
    name = data.name if data.name is not None else wallet.name
    currency = data.currency if data.currency is not None else wallet.currency
    try:
        return WalletService.update_wallet(db, wallet, name, currency)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{wallet_id}")
def delete_wallet(
    wallet: Wallet = Depends(get_owned_wallet_or_404),
    db: Session = Depends(get_db),
):
    """Delete a wallet together with its ledger, assets and snapshots."""
    WalletService.delete_wallet(db, wallet)
    return {"ok": True}


@router.get("/{wallet_id}/valuation", response_model=WalletValuationResponse)
def get_wallet_valuation(
    wallet: Wallet = Depends(get_owned_wallet_or_404),
    valuation_service: ValuationService = Depends(get_valuation_service),
    db: Session = Depends(get_db),
):
    """Live valuation of one wallet in its own currency."""
    summary = valuation_service.value_wallet(db, wallet)
    return {
        "wallet_id": wallet.id,
        "currency": wallet.currency,
        "main_value": money_float(summary.main_value),
        "other_value": money_float(summary.other_value),
        "current_total_value": money_float(summary.current_total_value),
        "invested": money_float(summary.invested),
        "overall_pl": money_float(summary.overall_pl),
        "allocation": allocation_response(summary),
        "priced_asset_count": summary.priced_asset_count,
        "unpriced_asset_ids": summary.unpriced_asset_ids,
    }
