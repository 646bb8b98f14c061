"""Duplicate-detection hash for transactions."""

import hashlib
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def format_amount_for_hash(amount: Decimal) -> str:
    """Render an amount with exactly two decimals ("-65.00")."""
    return str(Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP))


def compute_transaction_hash(txn_date: date, amount: Decimal, merchant: str) -> str:
    """Compute the SHA-256 hash identifying a transaction's original values.

    Input is "YYYY-MM-DD 00:00:00|<amount>|<merchant>". Balance is not part
    of the key, so two rows are duplicates iff date, merchant and amount match.
    """
    payload = f"{txn_date.isoformat()} 00:00:00|{format_amount_for_hash(amount)}|{merchant}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
