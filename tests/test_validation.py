import pytest

from pricing_core.errors import ValidationError
from pricing_core.validation import (
    join_identifiers,
    normalize_retailer,
    require_date,
    require_identifier,
    require_schedule,
)


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, "", "   ", 123])
def test_require_identifier_rejects_empty_or_non_string(value):
    with pytest.raises(ValidationError):
        require_identifier(value)


@pytest.mark.unit
def test_require_identifier_passes_value_through_unchanged():
    url = "https://www.amazon.com/dp/B08N5WRWNW?th=1&psc=1"
    assert require_identifier(url) == url
    assert require_identifier(" 0123 ") == " 0123 "
    assert require_identifier("012345678901") == "012345678901"


@pytest.mark.unit
def test_join_identifiers_trims_each_entry():
    assert join_identifiers(" 012345678901, B08N5WRWNW ,MX-123") == "012345678901,B08N5WRWNW,MX-123"


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, "", "a,,b", "a, ", ["a", "b"]])
def test_join_identifiers_rejects_empty_entries(value):
    with pytest.raises(ValidationError):
        join_identifiers(value)


@pytest.mark.unit
def test_require_date_accepts_iso_calendar_date():
    assert require_date("2024-01-31", "start_date") == "2024-01-31"
    assert require_date("2024-02-29", "start_date") == "2024-02-29"


@pytest.mark.unit
@pytest.mark.parametrize("value", ["2024/01/31", "01-31-2024", "2024-1-5", "2024-02-30", "", None, "2024-01-31T00:00:00"])
def test_require_date_rejects_other_formats(value):
    with pytest.raises(ValidationError) as e:
        require_date(value, "end_date")
    assert "end_date" in str(e.value)


@pytest.mark.unit
def test_require_date_does_not_compare_range():
    # start after end is left to ShopSavvy
    assert require_date("2024-12-31", "start_date") == "2024-12-31"
    assert require_date("2024-01-01", "end_date") == "2024-01-01"


@pytest.mark.unit
@pytest.mark.parametrize("value", ["hourly", "daily", "weekly"])
def test_require_schedule_accepts_known_frequencies(value):
    assert require_schedule(value) == value


@pytest.mark.unit
@pytest.mark.parametrize("value", ["monthly", "Daily", " daily", "", None])
def test_require_schedule_rejects_everything_else(value):
    with pytest.raises(ValidationError) as e:
        require_schedule(value)
    assert "hourly, daily, weekly" in str(e.value)


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("amazon.com", "amazon.com"),
        ("  BestBuy.com ", "bestbuy.com"),
        ("https://www.target.com/", "target.com"),
        ("http://walmart.com", "walmart.com"),
    ],
)
def test_normalize_retailer_reduces_to_domain(raw, expected):
    assert normalize_retailer(raw) == expected


@pytest.mark.unit
def test_normalize_retailer_optional_blank_means_no_filter():
    assert normalize_retailer(None) is None
    assert normalize_retailer("  ") is None


@pytest.mark.unit
def test_normalize_retailer_required_rejects_blank():
    with pytest.raises(ValidationError):
        normalize_retailer("", required=True)


@pytest.mark.unit
def test_normalize_retailer_rejects_inner_whitespace():
    with pytest.raises(ValidationError):
        normalize_retailer("best buy")
