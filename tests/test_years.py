import pytest

from citetrend.models import Record
from citetrend.years import extract_year

from conftest import CURRENT_YEAR


def test_pub_year_takes_precedence():
    record = Record(
        pub_year="2018",
        first_publication_date="2019-01-01",
        electronic_publication_date="2020-01-01",
    )
    assert extract_year(record, CURRENT_YEAR) == 2018


def test_falls_back_to_first_publication_date():
    record = Record(first_publication_date="2019-05-01", electronic_publication_date="2021-09-10")
    assert extract_year(record, CURRENT_YEAR) == 2019


def test_falls_back_to_electronic_publication_date():
    record = Record(electronic_publication_date="2021-09-10")
    assert extract_year(record, CURRENT_YEAR) == 2021


def test_empty_pub_year_is_treated_as_absent():
    record = Record(pub_year="", first_publication_date="2019-05-01")
    assert extract_year(record, CURRENT_YEAR) == 2019


def test_invalid_pub_year_does_not_fall_through():
    record = Record(pub_year="1650", first_publication_date="2019-05-01")
    assert extract_year(record, CURRENT_YEAR) is None


def test_no_fields_means_no_year():
    assert extract_year(Record(), CURRENT_YEAR) is None


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1700", 1700),
        ("1699", None),
        (str(CURRENT_YEAR + 1), CURRENT_YEAR + 1),
        (str(CURRENT_YEAR + 2), None),
        ("n.d.", None),
        ("2019abc", 2019),
    ],
)
def test_year_range_and_parsing(value, expected):
    assert extract_year(Record(pub_year=value), CURRENT_YEAR) == expected


def test_defaults_to_current_year():
    assert extract_year(Record(pub_year="2001")) == 2001
    assert extract_year(Record(pub_year="9999")) is None


def test_record_from_json_stringifies_numeric_year():
    record = Record.from_json({"id": "1", "pubYear": 2015})
    assert record.pub_year == "2015"
    assert record.first_publication_date is None
    assert record.raw == {"id": "1", "pubYear": 2015}


def test_overlong_numeric_year_is_no_year():
    assert extract_year(Record(pub_year="9" * 5000), CURRENT_YEAR) is None
    assert extract_year(Record(pub_year="2019" + "0" * 10), CURRENT_YEAR) is None
