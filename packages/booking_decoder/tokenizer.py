"""Key/value tokenizer for purpose text.

Inline labels (``IBAN+``, ``EREF:``, ``KTO/BLZ`` ...) split a purpose string
into segments. All label matches are collected first; the segments are then
folded right to left so each raw value is bounded by the next label, or by
the first genuine (non-aligned) delimiter inside it, whichever comes first.
Whatever is not consumed by a label becomes the remittance note.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from .alignment import first_unaligned, remove_aligned, replace_recursive
from .logging_setup import get_logger
from .models import Booking
from .resolver import normalize_label, resolve_field

_logger = get_logger("booking_decoder.tokenizer")

# Label vocabulary with the suffix each label carries in exported text.
LABEL_PATTERNS: tuple[str, ...] = (
    r"IBAN[:+]",
    r"BIC[:+]",
    r"EREF[:+]",
    r"KREF[:+]",
    r"MREF[:+]",
    r"CRED[:+]",
    r"SVWZ[:+]",
    r"EndtoEnd:",
    r"Kundenref\.:",
    r"Mandatsref\.:",
    r"Creditor-ID:",
    r"Debitor-ID:",
    r"KTO/BLZ",
    r"Purpose:",
)

DEFAULT_KV_PERIOD = 22


@dataclass(frozen=True, slots=True)
class Segment:
    """One label occurrence and the value it bounds.

    ``start``/``end`` delimit the consumed span (separator, label and raw
    value) in the tokenized text.
    """

    label: str
    raw_value: str
    value: str
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class Tokenized:
    segments: tuple[Segment, ...]
    residual: str


@lru_cache(maxsize=8)
def _label_regex(delimiter: str) -> re.Pattern[str]:
    labels = "|".join(f"(?:{p})" for p in LABEL_PATTERNS)
    return re.compile(
        rf"(?:^| |{re.escape(delimiter)})(?P<label>{labels})[ ]*",
        re.IGNORECASE,
    )


def clean_value(raw: str, delimiter: str, period: int) -> str:
    """Strip padding, turn separators into spaces and trim the ends."""

    value = remove_aligned(raw, delimiter, period)
    value = replace_recursive(value, delimiter, " ")
    return value.strip(delimiter + " ")


def tokenize(purpose: str, delimiter: str, period: int = DEFAULT_KV_PERIOD) -> Tokenized:
    """Split ``purpose`` into label segments and residual text.

    Segments are returned rightmost first, the order in which they are
    resolved.
    """

    matches = list(_label_regex(delimiter).finditer(purpose))

    segments: list[Segment] = []
    leftovers: list[str] = []
    for i in range(len(matches) - 1, -1, -1):
        m = matches[i]
        bound = matches[i + 1].start() if i + 1 < len(matches) else len(purpose)
        raw = purpose[m.end() : bound]
        split = first_unaligned(raw, delimiter, period)
        if split is not None:
            raw = raw[:split]
        value_end = m.end() + len(raw)
        leftovers.append(purpose[value_end:bound])
        segments.append(
            Segment(
                label=normalize_label(m.group("label")),
                raw_value=raw,
                value=clean_value(raw, delimiter, period),
                start=m.start(),
                end=value_end,
            )
        )

    head = purpose[: matches[0].start()] if matches else purpose
    residual = head + "".join(reversed(leftovers))
    return Tokenized(segments=tuple(segments), residual=residual)


def _clean_residual(residual: str, delimiter: str) -> str | None:
    text = replace_recursive(residual.replace(delimiter, " "), "  ", " ")
    return text.strip() or None


def process_key_value_pairs(
    booking: Booking,
    purpose: str | None,
    delimiter: str,
    period: int = DEFAULT_KV_PERIOD,
) -> None:
    """Decode ``purpose`` into ``booking``'s reference fields and note.

    The previous ``remittance_information`` (the raw purpose) is discarded.
    An ``SVWZ`` value becomes the note; leftover text is appended to it.
    """

    if purpose is None:
        return

    booking.remittance_information = None
    tokenized = tokenize(purpose, delimiter, period)
    for segment in tokenized.segments:
        resolve_field(booking, segment.label, segment.value)

    residual = _clean_residual(tokenized.residual, delimiter)
    note = booking.remittance_information
    if residual is not None:
        note = f"{note} {residual}" if note else residual
    booking.remittance_information = note

    _logger.debug(
        "tokenize:done labels=%d residual=%s",
        len(tokenized.segments),
        "yes" if residual else "no",
    )


__all__ = [
    "DEFAULT_KV_PERIOD",
    "LABEL_PATTERNS",
    "Segment",
    "Tokenized",
    "clean_value",
    "process_key_value_pairs",
    "tokenize",
]
