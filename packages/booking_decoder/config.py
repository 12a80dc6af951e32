"""Decoder settings.

The alignment periods and the small mapping tables were observed per bank and
have no general rule behind them, so they are configuration rather than
constants baked into the decoding code. ``DecoderSettings()`` carries the
observed defaults; ``settings_from_env()`` lets a deployment override the
periods without code changes:

- ``BOOKING_DECODER_KV_PERIOD``: period used inside key/value segments.
- ``BOOKING_DECODER_LEADING_SEPA_PERIOD``: pre-clean period of the
  leading-SEPA family.
- ``BOOKING_DECODER_TRAILING_TEXT_PERIOD``: pre-clean period of the
  trailing-text family.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import BankFamily

# Remitted-name values that actually are a note when no other note exists.
DEFAULT_RECLASSIFIED_NAMES: tuple[str, ...] = (
    "GUTSCHRIFT",
    "KREDITAUSZAHL.",
    "KREDITZINSEN",
    "KREDIT-RATE",
    "RECHNUNGSABSCHL",
)

DEFAULT_CATEGORY_MAP: dict[str, str] = {
    "[Umbuchung]": "(Umbuchung)",
}


class DecoderSettings(BaseModel):
    """Per-bank constants and mapping tables used by the decoder."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key_value_period: int = 22
    family_periods: dict[BankFamily, int] = Field(
        default_factory=lambda: {
            BankFamily.LEADING_SEPA: 27,
            BankFamily.TRAILING_TEXT: 27,
        }
    )
    reclassified_names: tuple[str, ...] = DEFAULT_RECLASSIFIED_NAMES
    category_map: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_CATEGORY_MAP))
    # Width of the exported name column; a full column continues without a space.
    name_column_width: int = 27

    @field_validator("key_value_period", "name_column_width")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("family_periods")
    @classmethod
    def _positive_periods(cls, v: dict[BankFamily, int]) -> dict[BankFamily, int]:
        for family, period in v.items():
            if period <= 0:
                raise ValueError(f"period for {family.value} must be a positive integer")
        return v

    @field_validator("reclassified_names")
    @classmethod
    def _upper_names(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(s.strip().upper() for s in v if s.strip())

    def period_for(self, family: BankFamily) -> int | None:
        """Return the pre-clean period of ``family`` (``None`` if it has none)."""

        return self.family_periods.get(family)


_PERIOD_ENV_VARS: dict[str, BankFamily | None] = {
    "BOOKING_DECODER_KV_PERIOD": None,
    "BOOKING_DECODER_LEADING_SEPA_PERIOD": BankFamily.LEADING_SEPA,
    "BOOKING_DECODER_TRAILING_TEXT_PERIOD": BankFamily.TRAILING_TEXT,
}


def _env_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def settings_from_env(base: DecoderSettings | None = None) -> DecoderSettings:
    """Return ``base`` (or the defaults) with period overrides from the environment."""

    settings = base or DecoderSettings()
    updates: dict[str, object] = {}
    family_periods = dict(settings.family_periods)
    for name, family in _PERIOD_ENV_VARS.items():
        raw = os.getenv(name)
        if not raw:
            continue
        value = _env_int(name, raw)
        if family is None:
            updates["key_value_period"] = value
        else:
            family_periods[family] = value
    if not updates and family_periods == settings.family_periods:
        return settings
    # Re-validate through the constructor so overrides get the same checks.
    data = settings.model_dump()
    data.update(updates)
    data["family_periods"] = family_periods
    return DecoderSettings(**data)


__all__ = [
    "DEFAULT_CATEGORY_MAP",
    "DEFAULT_RECLASSIFIED_NAMES",
    "DecoderSettings",
    "settings_from_env",
]
