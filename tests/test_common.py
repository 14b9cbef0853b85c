from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest

from src.hr_backoffice.hr_backoffice.common.datetime_utils import month_bounds, normalize_day, parse_hhmm
from src.hr_backoffice.hr_backoffice.common.validators import require_positive_amount
from src.hr_backoffice.hr_backoffice.core.exceptions import InvalidTimeFormat, ValidationError
from src.hr_backoffice.hr_backoffice.database.bootstrap import _iter_sql_statements
from src.hr_backoffice.hr_backoffice.database.mysql_base import in_clause, normalize_mysql_time


def test_parse_hhmm_bounds():
    assert parse_hhmm("00:00") == time(0, 0)
    assert parse_hhmm("23:59") == time(23, 59)
    assert parse_hhmm("") is None
    assert parse_hhmm(None) is None
    with pytest.raises(InvalidTimeFormat):
        parse_hhmm("24:00")


def test_normalize_day_accepts_date_datetime_and_iso():
    assert normalize_day(date(2024, 3, 1)) == date(2024, 3, 1)
    assert normalize_day(datetime(2024, 3, 1, 23, 59)) == date(2024, 3, 1)
    assert normalize_day("2024-03-01T10:00:00Z") == date(2024, 3, 1)
    with pytest.raises(ValidationError):
        normalize_day("01/03/2024")


def test_month_bounds_handles_leap_years():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2023, 2)[1] == date(2023, 2, 28)


def test_require_positive_amount():
    assert require_positive_amount("12.50", "amount") == Decimal("12.50")
    with pytest.raises(ValidationError):
        require_positive_amount("NaN", "amount")


def test_normalize_mysql_time_variants():
    assert normalize_mysql_time(timedelta(hours=9, minutes=5, seconds=30)) == time(9, 5)
    assert normalize_mysql_time("08:30:00") == time(8, 30)
    assert normalize_mysql_time(time(7, 15, 10)) == time(7, 15)
    assert normalize_mysql_time(None) is None


def test_in_clause_empty_matches_nothing():
    assert in_clause("id", []) == ("1=0", [])
    assert in_clause("id", [1, 2]) == ("id IN (%s,%s)", [1, 2])


def test_sql_splitter_ignores_semicolons_in_strings():
    script = "CREATE TABLE a (x TEXT DEFAULT 'a;b');\nINSERT INTO a VALUES ('it\\'s;fine');\n"

    assert list(_iter_sql_statements(script)) == [
        "CREATE TABLE a (x TEXT DEFAULT 'a;b')",
        "INSERT INTO a VALUES ('it\\'s;fine')",
    ]
