import pytest
from pydantic import ValidationError

from src.rifugio.config import DEFAULT_URL
from tests.fakes import make_config


def test_defaults():
    config = make_config()
    assert config.rifugio_url == DEFAULT_URL
    assert (config.start_day, config.end_day, config.min_beds) == (21, 21, 2)
    assert config.overlay_timeout_ms == 3000
    assert config.close_selectors[0] == ".reveal-overlay .close"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("START_DAY", "10")
    monkeypatch.setenv("END_DAY", "15")
    monkeypatch.setenv("MIN_BEDS", "4")

    config = make_config()

    assert (config.start_day, config.end_day, config.min_beds) == (10, 15, 4)


def test_start_after_end_rejected():
    with pytest.raises(ValidationError):
        make_config(start_day=22, end_day=21)


@pytest.mark.parametrize("day", [0, 32])
def test_day_out_of_month_rejected(day):
    with pytest.raises(ValidationError):
        make_config(start_day=day, end_day=day)


def test_negative_minimum_rejected():
    with pytest.raises(ValidationError):
        make_config(min_beds=-1)


def test_log_level_normalized():
    assert make_config(log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        make_config(log_level="chatty")
