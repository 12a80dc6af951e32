"""Public interface for the ``booking_decoder`` package.

Re-exports the decoding entry points and models as the stable import surface.
There is no runtime logic here, only symbol re-exports.
"""

from .alignment import detect_delimiter, first_unaligned, is_aligned, remove_aligned
from .config import DecoderSettings, settings_from_env
from .errors import (
    ConflictingField,
    DecodeError,
    MalformedFieldValue,
    UnsupportedCategoryOrType,
    UnsupportedLabel,
)
from .identity import assign_identity, canonical_payload, compute_booking_id, make_split_booking
from .mapping import assemble_remitted_name, map_category, to_account_type_code
from .models import AccountTypeCode, BankFamily, Booking, CreditDebit, SplitPart
from .pipeline import (
    BatchItem,
    BatchResult,
    BookingPartition,
    RecordFailure,
    group_splits_by_batch,
    partition_bookings,
    process_batch,
)
from .preprocessors import DecodeState, advance_state, decode_booking
from .tokenizer import process_key_value_pairs, tokenize

__all__ = [
    # Decoding
    "decode_booking",
    "DecodeState",
    "advance_state",
    "process_key_value_pairs",
    "tokenize",
    "detect_delimiter",
    "first_unaligned",
    "is_aligned",
    "remove_aligned",
    # Identity / batches
    "assign_identity",
    "canonical_payload",
    "compute_booking_id",
    "make_split_booking",
    "process_batch",
    "partition_bookings",
    "group_splits_by_batch",
    "BatchItem",
    "BatchResult",
    "BookingPartition",
    "RecordFailure",
    # Mapping
    "map_category",
    "to_account_type_code",
    "assemble_remitted_name",
    # Models / settings
    "AccountTypeCode",
    "BankFamily",
    "Booking",
    "CreditDebit",
    "SplitPart",
    "DecoderSettings",
    "settings_from_env",
    # Errors
    "DecodeError",
    "ConflictingField",
    "UnsupportedLabel",
    "UnsupportedCategoryOrType",
    "MalformedFieldValue",
]
