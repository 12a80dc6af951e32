"""Delimiter detection and column-alignment cleanup for raw purpose text.

The exporting banking application joins the sub-fields of a purpose text with
a single delimiter and, independently, inserts the same delimiter as padding
whenever a fixed-width column of ``period`` characters fills up. In a raw
value the padding therefore sits at offsets ``P, 2P+L, 3P+2L, ...`` (``L`` is
the delimiter length); every other occurrence is a genuine separator.
"""

from __future__ import annotations

AT_DELIMITER = "@"
# Used when the purpose contains no '@': two consecutive spaces.
SPACE_DELIMITER = "  "


def detect_delimiter(purpose: str) -> str:
    """Return the delimiter in use for ``purpose``."""

    if AT_DELIMITER in purpose:
        return AT_DELIMITER
    return SPACE_DELIMITER


def is_aligned(pos: int, period: int, delimiter_len: int) -> bool:
    """Whether a delimiter at raw offset ``pos`` is column padding."""

    return pos == 0 or (
        pos >= period and (pos // period - 1) * delimiter_len == pos % period
    )


def first_unaligned(text: str, delimiter: str, period: int) -> int | None:
    """Return the raw offset of the first non-aligned ``delimiter`` in ``text``.

    Returns ``None`` when every occurrence is padding.
    """

    start = 0
    while (pos := text.find(delimiter, start)) >= 0:
        if not is_aligned(pos, period, len(delimiter)):
            return pos
        start = pos + len(delimiter)
    return None


def remove_aligned(text: str, delimiter: str, period: int) -> str:
    """Drop padding delimiters from ``text`` and keep genuine separators.

    ``run`` counts the content characters emitted since the last kept
    delimiter and ``dropped`` the padding removed since then. An occurrence
    is padding when nothing has been emitted yet, when it closes the next
    full column (``run == (dropped + 1) * period``), or when ``run`` is
    exactly one column. Raw offsets ``P, 2P+L, ...`` map to content counts
    ``P, 2P, ...``, so this agrees with :func:`is_aligned`.

    The one-column clause differs from the raw rule only for a delimiter
    directly following padding (``"A" * P + "@@x"``): it is dropped as well,
    so a second pass has nothing left to remove.
    """

    parts: list[str] = []
    run = dropped = 0
    emitted = False
    start = 0
    while (pos := text.find(delimiter, start)) >= 0:
        chunk = text[start:pos]
        parts.append(chunk)
        run += len(chunk)
        emitted = emitted or bool(chunk)
        start = pos + len(delimiter)
        if not emitted:
            continue
        if run == period or run == (dropped + 1) * period:
            dropped += 1
            continue
        parts.append(delimiter)
        run = dropped = 0
    parts.append(text[start:])
    return "".join(parts)


def replace_recursive(text: str, old: str, new: str) -> str:
    """Replace ``old`` with ``new`` until no occurrence of ``old`` is left.

    Only repeats when the replacement is shorter than ``old``; otherwise a
    single pass is performed.
    """

    if len(new) >= len(old):
        return text.replace(old, new)
    while old in text:
        text = text.replace(old, new)
    return text


__all__ = [
    "AT_DELIMITER",
    "SPACE_DELIMITER",
    "detect_delimiter",
    "first_unaligned",
    "is_aligned",
    "remove_aligned",
    "replace_recursive",
]
