"""Enumeration mappings applied next to purpose decoding.

Categories and account types exported by the banking application are mapped
to the target schema through closed tables. A value without a mapping is a
hard error so new values surface instead of being silently passed on.
"""

from __future__ import annotations

from collections.abc import Mapping

from .config import DEFAULT_CATEGORY_MAP
from .errors import UnsupportedCategoryOrType
from .models import AccountTypeCode

# Applied to account records, which DecoderSettings does not cover.
DEFAULT_ACCOUNT_TYPE_MAP: dict[str, AccountTypeCode] = {
    "BARGELDKONTO": AccountTypeCode.CASH,
    "BAUSPARKONTO": AccountTypeCode.CASH,
    "SPARBUCH": AccountTypeCode.CASH,
    "GIROKONTO": AccountTypeCode.CHECKING,
    "KREDITKARTENKONTO": AccountTypeCode.CREDIT_CARD,
    "FESTGELDKONTO": AccountTypeCode.FIXED_TERM_DEPOSIT,
}


def map_category(
    category: str | None,
    table: Mapping[str, str] = DEFAULT_CATEGORY_MAP,
) -> str | None:
    """Return the target category for ``category`` (``None`` passes through)."""

    if category is None:
        return None
    try:
        return table[category]
    except KeyError:
        raise UnsupportedCategoryOrType("category", category) from None


def to_account_type_code(
    account_type: str,
    table: Mapping[str, AccountTypeCode] = DEFAULT_ACCOUNT_TYPE_MAP,
) -> AccountTypeCode:
    """Return the account type code for an exported account type name.

    Lookup is case-insensitive; ``table`` keys are expected in upper case.
    """

    code = table.get(account_type.strip().upper())
    if code is None:
        raise UnsupportedCategoryOrType("account type", account_type)
    return code


def assemble_remitted_name(
    name: str | None,
    addition: str | None,
    column_width: int = 27,
) -> str | None:
    """Join the remitter name and its continuation field.

    A name that fills the whole export column was cut mid-word, so the
    continuation is appended without a space.
    """

    if not addition:
        return name
    if not name:
        return addition
    if len(name) == column_width:
        return name + addition
    return f"{name} {addition}"


__all__ = [
    "DEFAULT_ACCOUNT_TYPE_MAP",
    "assemble_remitted_name",
    "map_category",
    "to_account_type_code",
]
