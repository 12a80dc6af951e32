"""Dispatch of normalized purpose labels to booking fields.

``LABEL_HANDLERS`` maps each normalized label (upper case, ``:``/``+``
removed) to a setter. Reference fields follow "first write wins": a second
value is accepted only when it equals the stored one.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TypeAlias

from .alignment import replace_recursive
from .errors import ConflictingField, MalformedFieldValue, UnsupportedLabel
from .models import Booking

FieldSetter: TypeAlias = Callable[[Booking, str], None]


def _set_once(attr: str) -> FieldSetter:
    def _apply(booking: Booking, value: str) -> None:
        current = getattr(booking, attr)
        if not current:
            setattr(booking, attr, value or None)
        elif current != value:
            raise ConflictingField(attr, current, value, booking_id=booking.id)

    return _apply


def _set_remittance_note(booking: Booking, value: str) -> None:
    booking.remittance_information = replace_recursive(value, "  ", " ").strip() or None


def _set_account_and_bank_code(booking: Booking, value: str) -> None:
    account, sep, bank_code = value.partition("/")
    if not sep:
        raise MalformedFieldValue(
            "KTO/BLZ", value, "expected '<account>/<bank code>'", booking_id=booking.id
        )
    booking.remitted_account_number = account.strip().lstrip("0") or None
    booking.remitted_account_bank_code = bank_code.strip() or None


def _ignore(booking: Booking, value: str) -> None:
    return None


_iban = _set_once("remitted_account_iban")
_bic = _set_once("remitted_account_bic")
_end_to_end = _set_once("end_to_end_id")
_customer_ref = _set_once("payment_information_id")
_mandate = _set_once("mandate_id")
_creditor = _set_once("creditor_id")

LABEL_HANDLERS: Mapping[str, FieldSetter] = MappingProxyType(
    {
        "IBAN": _iban,
        "BIC": _bic,
        "EREF": _end_to_end,
        "ENDTOEND": _end_to_end,
        "KREF": _customer_ref,
        "KUNDENREF.": _customer_ref,
        "MREF": _mandate,
        "MANDATSREF.": _mandate,
        "CRED": _creditor,
        "CREDITOR-ID": _creditor,
        "DEBITOR-ID": _creditor,
        "SVWZ": _set_remittance_note,
        "KTO/BLZ": _set_account_and_bank_code,
        # Recognized so it is consumed from the text, but not stored.
        "PURPOSE": _ignore,
    }
)


def normalize_label(raw_label: str) -> str:
    """Return the dispatch key for a label as it appears in the text."""

    return raw_label.upper().replace("+", "").replace(":", "").strip()


def resolve_field(booking: Booking, label: str, value: str) -> None:
    """Assign ``value`` to the booking field selected by the normalized ``label``."""

    handler = LABEL_HANDLERS.get(label)
    if handler is None:
        raise UnsupportedLabel(label, value, booking_id=booking.id)
    handler(booking, value)


__all__ = ["LABEL_HANDLERS", "FieldSetter", "normalize_label", "resolve_field"]
