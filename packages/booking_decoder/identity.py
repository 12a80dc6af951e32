"""Booking identity assignment.

An id is ``<digest>-<counter>``: the digest is a SHA-256 over a canonical JSON
serialization of the booking without its own id, encoded as unpadded URL-safe
base64; the counter is a visible suffix that is *not* hashed. The first
counter whose id is still free within the batch wins, so identical bookings in
one run get ``-0``, ``-1``, ... while a single booking decoded on its own always
reproduces ``-0``.
"""

from __future__ import annotations

import base64
import hashlib
import json
from collections.abc import MutableSet
from dataclasses import replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from .logging_setup import get_logger
from .models import Booking, SplitPart

_logger = get_logger("booking_decoder.identity")

# Booking attribute -> SUPA key; the order here is the serialization order
# before key sorting and documents the schema mapping.
_SUPA_KEYS: dict[str, str] = {
    "account_id": "AcctId",
    "booking_date": "BookgDt",
    "value_date": "ValDt",
    "amount": "Amt",
    "amount_currency": "AmtCcy",
    "credit_debit": "CdtDbtInd",
    "end_to_end_id": "EndToEndId",
    "payment_information_id": "PmtInfId",
    "mandate_id": "MndtId",
    "creditor_id": "CdtrId",
    "remittance_information": "RmtInf",
    "booking_text": "BookgTxt",
    "remitted_name": "RmtdNm",
    "remitted_account_iban": "RmtdAcctIBAN",
    "remitted_account_number": "RmtdAcctNo",
    "remitted_account_bic": "RmtdAcctBIC",
    "remitted_account_bank_code": "RmtdAcctBankCode",
    "batch_booking": "BtchBookg",
    "batch_id": "BtchId",
    "category": "Category",
    "notes": "Notes",
}


def _canonical_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        q = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        return f"{q:.2f}"
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def canonical_payload(booking: Booking) -> dict[str, Any]:
    """Return the SUPA-keyed, non-null fields of ``booking`` except its id."""

    payload: dict[str, Any] = {}
    for attr, key in _SUPA_KEYS.items():
        value = getattr(booking, attr)
        if value is None:
            continue
        payload[key] = _canonical_value(value)
    return payload


def _digest(booking: Booking) -> str:
    data = json.dumps(
        canonical_payload(booking), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )
    raw = hashlib.sha256(data.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def compute_booking_id(booking: Booking, counter: int = 0) -> str:
    """Return the identity of ``booking`` with the given disambiguation counter."""

    if counter < 0:
        raise ValueError("counter must be non-negative")
    return f"{_digest(booking)}-{counter}"


def assign_identity(booking: Booking, used_ids: MutableSet[str]) -> str:
    """Set ``booking.id`` to the first free id and record it in ``used_ids``."""

    digest = _digest(booking)
    counter = 0
    while (candidate := f"{digest}-{counter}") in used_ids:
        counter += 1
    if counter:
        _logger.debug("identity:collision digest=%s counter=%d", digest, counter)
    booking.id = candidate
    used_ids.add(candidate)
    return candidate


def make_split_booking(
    collective: Booking,
    part: SplitPart,
    used_ids: MutableSet[str],
) -> Booking:
    """Clone a decoded collective booking into one of its split bookings.

    The clone takes the part's signed amount, category and note, is marked as
    a split of ``collective`` and receives its own identity.
    """

    if collective.id is None:
        raise ValueError("collective booking needs an id before it can be split")

    split = replace(
        collective,
        id=None,
        batch_booking=False,
        batch_id=collective.id,
        category=part.category,
        notes=part.note,
    )
    split.amount_signed = part.amount
    assign_identity(split, used_ids)
    return split


__all__ = [
    "assign_identity",
    "canonical_payload",
    "compute_booking_id",
    "make_split_booking",
]
