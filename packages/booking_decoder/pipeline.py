"""Sequential batch processing: decode, identify, expand split bookings.

Records are processed strictly in input order. Identity assignment must see
every id assigned earlier in the batch, and the leading-SEPA family carries a
:class:`~booking_decoder.preprocessors.DecodeState` from one record to the
next; both make the traversal a left fold over the batch.

Public surface:
- ``BatchItem`` / ``BatchResult`` / ``RecordFailure``
- ``process_batch``: decode and identify a batch of bookings.
- ``partition_bookings`` / ``group_splits_by_batch``: derived views over a
  processed batch (normal vs. collective vs. split bookings).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .config import DecoderSettings
from .errors import DecodeError
from .identity import assign_identity, make_split_booking
from .logging_setup import bind, get_logger
from .mapping import assemble_remitted_name, map_category
from .models import BankFamily, Booking, SplitPart
from .preprocessors import DecodeState, advance_state, decode_booking

_logger = get_logger("booking_decoder.pipeline")


@dataclass(slots=True)
class BatchItem:
    """A booking as delivered by the import, with its split parts (if any).

    ``name_addition`` is the continuation field of the remitted name; it is
    joined to ``booking.remitted_name`` before decoding.
    """

    booking: Booking
    splits: Sequence[SplitPart] = ()
    name_addition: str | None = None


@dataclass(frozen=True, slots=True)
class RecordFailure:
    position: int
    error: DecodeError


@dataclass(slots=True)
class BatchResult:
    """Processed bookings (each collective directly followed by its splits)."""

    bookings: list[Booking] = field(default_factory=list)
    failures: list[RecordFailure] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class BookingPartition:
    individual: list[Booking]
    collective: list[Booking]
    split: list[Booking]


def _process_one(
    item: BatchItem,
    family: BankFamily,
    state: DecodeState,
    settings: DecoderSettings,
    used_ids: set[str],
    map_categories: bool,
) -> tuple[list[Booking], DecodeState]:
    booking = item.booking
    booking.remitted_name = assemble_remitted_name(
        booking.remitted_name, item.name_addition, settings.name_column_width
    )
    state = decode_booking(booking, family, state, settings)

    parts = list(item.splits)
    if map_categories:
        # Map everything before any id is taken so a failure leaves used_ids untouched.
        booking.category = map_category(booking.category, settings.category_map)
        parts = [
            SplitPart(p.amount, map_category(p.category, settings.category_map), p.note)
            for p in parts
        ]

    if parts:
        booking.batch_booking = True
    assign_identity(booking, used_ids)

    out = [booking]
    out.extend(make_split_booking(booking, part, used_ids) for part in parts)
    return out, state


def process_batch(
    items: Iterable[BatchItem],
    family: BankFamily,
    *,
    settings: DecoderSettings | None = None,
    used_ids: set[str] | None = None,
    map_categories: bool = False,
    skip_errors: bool = False,
) -> BatchResult:
    """Decode and identify ``items`` in order.

    Parameters
    ----------
    family:
        Pre-processing variant for every booking of this batch.
    used_ids:
        Ids already taken in the current run; extended in place. A fresh set
        is used when omitted.
    map_categories:
        Map booking and split categories through ``settings.category_map``.
    skip_errors:
        When ``False`` (default) the first :class:`DecodeError` aborts the
        batch. When ``True`` the failing record and its splits are left out,
        the failure is recorded and processing continues.
    """

    settings = settings or DecoderSettings()
    used = used_ids if used_ids is not None else set()
    state = DecodeState()
    result = BatchResult()
    log = bind(_logger, family=family.value)

    for position, item in enumerate(items):
        # A record that fails still counts for the SEPA prefixes seen so far.
        settled = advance_state(state, family, item.booking.remittance_information)
        try:
            produced, state = _process_one(item, family, state, settings, used, map_categories)
        except DecodeError as exc:
            state = settled
            if not skip_errors:
                log.error(
                    "batch:record_failed position=%d error=%s",
                    position,
                    exc.__class__.__name__,
                )
                raise
            log.warning(
                "batch:record_skipped position=%d error=%s detail=%s",
                position,
                exc.__class__.__name__,
                exc,
            )
            result.failures.append(RecordFailure(position=position, error=exc))
            continue
        result.bookings.extend(produced)

    log.info(
        "batch:done bookings=%d failures=%d",
        len(result.bookings),
        len(result.failures),
    )
    return result


def partition_bookings(bookings: Iterable[Booking]) -> BookingPartition:
    """Split bookings into normal, collective and split bookings (order kept)."""

    individual: list[Booking] = []
    collective: list[Booking] = []
    split: list[Booking] = []
    for b in bookings:
        if b.batch_booking is None:
            individual.append(b)
        elif b.batch_booking:
            collective.append(b)
        else:
            split.append(b)
    return BookingPartition(individual=individual, collective=collective, split=split)


def group_splits_by_batch(bookings: Iterable[Booking]) -> dict[str | None, list[Booking]]:
    """Group split bookings by their collective's id, in first-seen order."""

    groups: dict[str | None, list[Booking]] = {}
    for b in bookings:
        if b.is_split:
            groups.setdefault(b.batch_id, []).append(b)
    return groups


__all__ = [
    "BatchItem",
    "BatchResult",
    "BookingPartition",
    "RecordFailure",
    "group_splits_by_batch",
    "partition_bookings",
    "process_batch",
]
