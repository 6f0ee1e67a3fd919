from datetime import date

import pytest

from utils.app_config import get_db_folder, get_log_level, load_config, save_config, set_db_folder
from utils.currency import format_currency, from_minor_units, parse_amount, to_minor_units
from utils.date_helpers import add_months, month_key, months_ago_str, parse_csv_date, short_month_name


def test_minor_unit_conversion_rounds_half_up():
    assert to_minor_units("45.67") == 4567
    assert to_minor_units(0.125) == 13
    assert to_minor_units(500) == 50000
    assert from_minor_units(-15000) == -150.0
    assert from_minor_units(None) == 0.0
    with pytest.raises(ValueError):
        to_minor_units("abc")
    with pytest.raises(ValueError):
        to_minor_units(float("nan"))


def test_parse_amount_strips_symbols():
    assert parse_amount("$1,234.56") == 123456
    assert parse_amount(" -€12 ") == -1200
    with pytest.raises(ValueError):
        parse_amount("  ")


def test_formatting():
    assert format_currency(1234.5) == "$1,234.50"


def test_add_months_clamps_day():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)
    assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)
    assert months_ago_str(3, date(2024, 5, 31)) == "2024-02-29"


def test_month_helpers():
    assert month_key(2024, 2) == "2024-02"
    assert short_month_name("2024-02") == "Feb"
    assert short_month_name("bogus") == "bogus"
    with pytest.raises(ValueError):
        month_key(2024, 0)


def test_parse_csv_date_accepts_iso_and_us():
    assert parse_csv_date("2024-01-05") == date(2024, 1, 5)
    assert parse_csv_date(" 01/05/2024 ") == date(2024, 1, 5)
    assert parse_csv_date("5 Jan 2024") is None


def test_config_round_trip(tmp_path):
    path = tmp_path / "config.json"
    assert load_config(path) == {}
    assert get_db_folder(path) is None
    assert get_log_level(path) == "INFO"

    set_db_folder("/data/ledger", path)
    save_config({**load_config(path), "log_level": "debug"}, path)

    assert get_db_folder(path) == "/data/ledger"
    assert get_log_level(path) == "DEBUG"

    set_db_folder(None, path)
    assert get_db_folder(path) is None


def test_corrupt_config_is_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{oops", encoding="utf-8")
    assert load_config(path) == {}
