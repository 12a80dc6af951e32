"""Bank-family pre-processing of purpose text.

Each family peels the booking text (and for Sparda-Bank BW possibly the
remitter name) off the raw purpose before the shared key/value tokenizer runs.
The family is chosen by the caller per account; nothing here guesses it.

The leading-SEPA family needs to know whether any earlier booking of the same
batch carried a SEPA prefix. That knowledge is threaded through the batch as
an immutable :class:`DecodeState`: ``decode_booking`` takes the state of the
previous booking and returns the state for the next one.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import TypeAlias

from .alignment import AT_DELIMITER, detect_delimiter, remove_aligned
from .config import DecoderSettings
from .logging_setup import get_logger
from .models import BankFamily, Booking
from .tokenizer import process_key_value_pairs

_logger = get_logger("booking_decoder.preprocessors")

_DEFAULT_SETTINGS = DecoderSettings()


@dataclass(frozen=True, slots=True)
class DecodeState:
    """Cross-record state of one batch traversal."""

    had_sepa_match: bool = False


@lru_cache(maxsize=8)
def _trailing_sepa_regex(delimiter: str) -> re.Pattern[str]:
    return re.compile(
        rf"(?:^|{re.escape(delimiter)})(?P<sepa>SEPA-[A-Z]{{2}} .+?)$",
        re.IGNORECASE,
    )


@lru_cache(maxsize=8)
def _leading_sepa_regex(delimiter: str) -> re.Pattern[str]:
    return re.compile(
        rf"^(?P<sepa>SEPA[ \-].+?)(?:{re.escape(delimiter)}|$)",
        re.IGNORECASE,
    )


def _split_last_field(booking: Booking, purpose: str, delimiter: str) -> str:
    """Move the text after the last ``delimiter`` into the booking text."""

    if delimiter not in purpose:
        return purpose
    last = purpose.rfind(delimiter)
    booking.booking_text = purpose[last + len(delimiter) :].strip() or None
    return purpose[:last]


# ---------------------------------------------------------------------------
# Family variants
# ---------------------------------------------------------------------------


def _trailing_sepa(
    booking: Booking,
    purpose: str,
    delimiter: str,
    state: DecodeState,
    settings: DecoderSettings,
) -> DecodeState:
    m = _trailing_sepa_regex(delimiter).search(purpose)
    if m:
        booking.booking_text = m.group("sepa").strip() or None
        purpose = purpose[: m.start()]
    else:
        purpose = _split_last_field(booking, purpose, delimiter)

    process_key_value_pairs(booking, purpose, delimiter, settings.key_value_period)
    return state


def _leading_sepa(
    booking: Booking,
    purpose: str,
    delimiter: str,
    state: DecodeState,
    settings: DecoderSettings,
) -> DecodeState:
    m = _leading_sepa_regex(delimiter).match(purpose)
    if m:
        state = replace(state, had_sepa_match=True)
        booking.booking_text = m.group("sepa").strip() or None
        purpose = purpose[m.end() :]

    period = settings.period_for(BankFamily.LEADING_SEPA)
    if period is not None and delimiter in purpose:
        purpose = remove_aligned(purpose, delimiter, period)

    # Without any SEPA prefix in the batch so far, the first field is the name.
    if not state.had_sepa_match and delimiter == AT_DELIMITER and delimiter in purpose:
        idx = purpose.index(delimiter)
        booking.remitted_name = purpose[:idx] or None
        purpose = purpose[idx + len(delimiter) :]

    process_key_value_pairs(booking, purpose, delimiter, settings.key_value_period)
    return state


def _trailing_text(
    booking: Booking,
    purpose: str,
    delimiter: str,
    state: DecodeState,
    settings: DecoderSettings,
) -> DecodeState:
    purpose = _split_last_field(booking, purpose, delimiter)

    period = settings.period_for(BankFamily.TRAILING_TEXT)
    if period is not None and AT_DELIMITER in purpose:
        purpose = remove_aligned(purpose, AT_DELIMITER, period)

    process_key_value_pairs(booking, purpose, delimiter, settings.key_value_period)
    return state


_Variant: TypeAlias = Callable[[Booking, str, str, DecodeState, DecoderSettings], DecodeState]

_VARIANTS: dict[BankFamily, _Variant] = {
    BankFamily.TRAILING_SEPA: _trailing_sepa,
    BankFamily.LEADING_SEPA: _leading_sepa,
    BankFamily.TRAILING_TEXT: _trailing_text,
}


def advance_state(state: DecodeState, family: BankFamily, purpose: str | None) -> DecodeState:
    """Return the batch state after a booking with ``purpose`` has been seen.

    Depends on the purpose prefix only, so it holds even when decoding the
    rest of that booking fails.
    """

    if family is not BankFamily.LEADING_SEPA or purpose is None or state.had_sepa_match:
        return state
    if _leading_sepa_regex(detect_delimiter(purpose)).match(purpose):
        return replace(state, had_sepa_match=True)
    return state


def reclassify_remitted_name(booking: Booking, names: tuple[str, ...]) -> None:
    """Turn a generic remitted name into the note when no note exists."""

    if booking.remittance_information is not None or not booking.remitted_name:
        return
    if booking.remitted_name.upper() in names:
        booking.remittance_information = booking.remitted_name
        booking.remitted_name = None


def decode_booking(
    booking: Booking,
    family: BankFamily,
    state: DecodeState | None = None,
    settings: DecoderSettings | None = None,
) -> DecodeState:
    """Decode ``booking.remittance_information`` in place.

    Returns the state to pass to the next booking of the same batch. A
    booking without purpose text is left unchanged (apart from the
    leading-SEPA name reclassification).
    """

    state = state or DecodeState()
    settings = settings or _DEFAULT_SETTINGS
    purpose = booking.remittance_information

    if purpose is not None:
        delimiter = detect_delimiter(purpose)
        _logger.debug(
            "decode:booking family=%s delimiter=%r length=%d",
            family.value,
            delimiter,
            len(purpose),
        )
        state = _VARIANTS[family](booking, purpose, delimiter, state, settings)

    if family is BankFamily.LEADING_SEPA:
        reclassify_remitted_name(booking, settings.reclassified_names)
    return state


__all__ = ["DecodeState", "advance_state", "decode_booking", "reclassify_remitted_name"]
