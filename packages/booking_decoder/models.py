"""Data models for ``booking_decoder``.

``Booking`` follows the account-turnover layout of the SUPA booking schema but
only carries the fields the purpose decoder reads or writes, plus the fields
that feed the identity hash. Records are created by an import step with the
raw purpose text in ``remittance_information`` and are mutated in place by the
decoder.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class CreditDebit(str, Enum):
    """Credit/debit indicator of a posted amount."""

    CREDIT = "CRDT"
    DEBIT = "DBIT"


class AccountTypeCode(str, Enum):
    """SUPA account type codes."""

    CHECKING = "CACC"
    CASH = "CASH"
    SECURITIES_PORTFOLIO = "PRTF"
    FIXED_TERM_DEPOSIT = "DPST"
    CREDIT_CARD = "CRDC"
    PAYPAL = "PPAL"
    CRYPTOCURRENCY = "CRYP"
    # Deprecated alias of CHECKING kept for older data sets
    GIRO = "GIRO"


class BankFamily(str, Enum):
    """Pre-processing variant applied to a bank's purpose text.

    - ``TRAILING_SEPA``: SEPA booking text in the last field (Commerzbank).
    - ``LEADING_SEPA``: SEPA booking text in the first field, optionally
      followed by the remitter name (Sparda-Bank BW).
    - ``TRAILING_TEXT``: plain booking text in the last field (PSD Bank, DKB).
    """

    TRAILING_SEPA = "trailing-sepa"
    LEADING_SEPA = "leading-sepa"
    TRAILING_TEXT = "trailing-text"

    @classmethod
    def from_name(cls, name: str) -> BankFamily:
        """Resolve a family from its value or a bank name alias."""

        key = name.strip().lower().replace(" ", "-").replace("_", "-")
        for family in cls:
            if key == family.value:
                return family
        family = _BANK_ALIASES.get(key)
        if family is None:
            raise ValueError(f"unknown bank family: {name!r}")
        return family


_BANK_ALIASES: dict[str, BankFamily] = {
    "a": BankFamily.TRAILING_SEPA,
    "commerzbank": BankFamily.TRAILING_SEPA,
    "b": BankFamily.LEADING_SEPA,
    "sparda": BankFamily.LEADING_SEPA,
    "sparda-bw": BankFamily.LEADING_SEPA,
    "sparda-bank-bw": BankFamily.LEADING_SEPA,
    "c": BankFamily.TRAILING_TEXT,
    "psd": BankFamily.TRAILING_TEXT,
    "psd-bank": BankFamily.TRAILING_TEXT,
    "dkb": BankFamily.TRAILING_TEXT,
}


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class Booking:
    """A single account booking (transaction).

    ``batch_booking`` is tri-state: ``None`` for a normal booking, ``True``
    for a collective booking and ``False`` for a split booking of a
    collective, in which case ``batch_id`` holds the collective's ``id``.
    ``amount`` is unsigned; the sign lives in ``credit_debit``.
    """

    id: str | None = None
    account_id: str | None = None
    booking_date: date | None = None
    value_date: date | None = None
    amount: Decimal | None = None
    amount_currency: str | None = None
    credit_debit: CreditDebit | None = None
    end_to_end_id: str | None = None
    payment_information_id: str | None = None
    mandate_id: str | None = None
    creditor_id: str | None = None
    remittance_information: str | None = None
    booking_text: str | None = None
    remitted_name: str | None = None
    remitted_account_iban: str | None = None
    remitted_account_bic: str | None = None
    remitted_account_number: str | None = None
    remitted_account_bank_code: str | None = None
    batch_booking: bool | None = None
    batch_id: str | None = None
    category: str | None = None
    notes: str | None = None

    @property
    def amount_signed(self) -> Decimal | None:
        if self.amount is None or self.credit_debit is None:
            return None
        if self.credit_debit is CreditDebit.DEBIT:
            return -self.amount
        return self.amount

    @amount_signed.setter
    def amount_signed(self, value: Decimal | None) -> None:
        signed = value if value is not None else Decimal(0)
        self.amount = abs(signed)
        self.credit_debit = CreditDebit.DEBIT if signed < 0 else CreditDebit.CREDIT

    @property
    def is_collective(self) -> bool:
        return self.batch_booking is True

    @property
    def is_split(self) -> bool:
        return self.batch_booking is False


@dataclass(frozen=True, slots=True)
class SplitPart:
    """One constituent of a collective booking as delivered by the import.

    ``amount`` is signed (negative for debits).
    """

    amount: Decimal
    category: str | None = None
    note: str | None = None


__all__ = [
    "AccountTypeCode",
    "BankFamily",
    "Booking",
    "CreditDebit",
    "SplitPart",
]
