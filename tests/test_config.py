import pytest
from pydantic import ValidationError

from booking_decoder import BankFamily, DecoderSettings, settings_from_env


def test_defaults():
    settings = DecoderSettings()
    assert settings.key_value_period == 22
    assert settings.period_for(BankFamily.LEADING_SEPA) == 27
    assert settings.period_for(BankFamily.TRAILING_TEXT) == 27
    assert settings.period_for(BankFamily.TRAILING_SEPA) is None
    assert "GUTSCHRIFT" in settings.reclassified_names
    assert settings.category_map["[Umbuchung]"] == "(Umbuchung)"
    assert settings.name_column_width == 27


def test_settings_are_frozen():
    settings = DecoderSettings()
    with pytest.raises(ValidationError):
        settings.key_value_period = 10


@pytest.mark.parametrize("field", ["key_value_period", "name_column_width"])
def test_non_positive_values_rejected(field):
    with pytest.raises(ValidationError):
        DecoderSettings(**{field: 0})


def test_non_positive_family_period_rejected():
    with pytest.raises(ValidationError):
        DecoderSettings(family_periods={BankFamily.TRAILING_TEXT: -1})


def test_unknown_field_rejected():
    with pytest.raises(ValidationError):
        DecoderSettings(kv_period=22)


def test_reclassified_names_are_normalized():
    settings = DecoderSettings(reclassified_names=(" gutschrift ", ""))
    assert settings.reclassified_names == ("GUTSCHRIFT",)


def test_account_types_are_not_a_setting():
    with pytest.raises(ValidationError):
        DecoderSettings(account_type_map={})


def test_family_periods_accept_values():
    settings = DecoderSettings(family_periods={"leading-sepa": 30})
    assert settings.period_for(BankFamily.LEADING_SEPA) == 30
    assert settings.period_for(BankFamily.TRAILING_TEXT) is None


def test_env_without_overrides_returns_base():
    base = DecoderSettings()
    assert settings_from_env(base) is base


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("BOOKING_DECODER_KV_PERIOD", "20")
    monkeypatch.setenv("BOOKING_DECODER_TRAILING_TEXT_PERIOD", " 35 ")
    settings = settings_from_env()
    assert settings.key_value_period == 20
    assert settings.period_for(BankFamily.TRAILING_TEXT) == 35
    assert settings.period_for(BankFamily.LEADING_SEPA) == 27


def test_env_override_keeps_base_tables(monkeypatch):
    monkeypatch.setenv("BOOKING_DECODER_LEADING_SEPA_PERIOD", "28")
    base = DecoderSettings(category_map={"A": "B"})
    settings = settings_from_env(base)
    assert settings.period_for(BankFamily.LEADING_SEPA) == 28
    assert settings.category_map == {"A": "B"}


def test_env_non_integer(monkeypatch):
    monkeypatch.setenv("BOOKING_DECODER_KV_PERIOD", "twenty")
    with pytest.raises(ValueError, match="BOOKING_DECODER_KV_PERIOD"):
        settings_from_env()


def test_env_non_positive(monkeypatch):
    monkeypatch.setenv("BOOKING_DECODER_LEADING_SEPA_PERIOD", "0")
    with pytest.raises(ValidationError):
        settings_from_env()
