"""Named failure kinds raised while decoding bookings.

All kinds derive from :class:`DecodeError` (itself a ``ValueError``) so callers
can either catch the whole family to log-and-skip a record, or a single kind to
extend a mapping table. A record that raised must be treated as untrustworthy:
assignments made before the failure are not rolled back.
"""

from __future__ import annotations


class DecodeError(ValueError):
    """Base class for decoding failures of a single booking."""

    def __init__(self, message: str, *, booking_id: str | None = None) -> None:
        self.booking_id = booking_id
        if booking_id is not None:
            message = f"{message} (booking {booking_id})"
        super().__init__(message)


class ConflictingField(DecodeError):
    """A label resolved to a value that disagrees with an already-set field."""

    def __init__(
        self,
        field: str,
        existing: str,
        incoming: str,
        *,
        booking_id: str | None = None,
    ) -> None:
        self.field = field
        self.existing = existing
        self.incoming = incoming
        super().__init__(
            f"Booking already contains a value for {field!r}: "
            f"{existing!r} (new value: {incoming!r})",
            booking_id=booking_id,
        )


class UnsupportedLabel(DecodeError):
    """A label matched in the purpose text has no dispatch rule."""

    def __init__(self, label: str, value: str, *, booking_id: str | None = None) -> None:
        self.label = label
        self.value = value
        super().__init__(
            f"Label {label!r} found in purpose field is not mapped (value: {value!r})",
            booking_id=booking_id,
        )


class UnsupportedCategoryOrType(DecodeError):
    """An input enumeration value (category, account type) has no known mapping."""

    def __init__(self, kind: str, value: str, *, booking_id: str | None = None) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f"No {kind} mapping for {value!r}", booking_id=booking_id)


class MalformedFieldValue(DecodeError):
    """A recognized label carries a value that cannot be split into its parts."""

    def __init__(
        self,
        label: str,
        value: str,
        reason: str,
        *,
        booking_id: str | None = None,
    ) -> None:
        self.label = label
        self.value = value
        super().__init__(f"Malformed {label} value {value!r}: {reason}", booking_id=booking_id)


__all__ = [
    "DecodeError",
    "ConflictingField",
    "UnsupportedLabel",
    "UnsupportedCategoryOrType",
    "MalformedFieldValue",
]
