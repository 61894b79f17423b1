"""Column defaults shared by the wallet models."""

import uuid
from datetime import datetime, timezone


def generate_uuid() -> str:
    """String primary key for wallets, assets, transactions and wallet assets."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
