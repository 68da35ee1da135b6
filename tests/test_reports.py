import pytest

from pricing_core.models import (
    CreditUsage,
    HistoryPoint,
    Offer,
    OfferHistory,
    Product,
    ProductHistory,
    ProductOffers,
    ScheduleEntry,
    UsagePeriod,
)
from pricing_core.reports import (
    format_date,
    format_offers,
    format_price_history,
    format_product,
    format_product_batch,
    format_retailer_offers,
    format_schedule_list,
    format_usage,
    usage_line,
    with_usage,
)


@pytest.mark.unit
def test_usage_line_reports_meta_verbatim():
    assert usage_line(CreditUsage(1, 999)) == "**Usage:** 1 credit used, 999 remaining"
    assert usage_line(CreditUsage(3, 0)) == "**Usage:** 3 credits used, 0 remaining"


@pytest.mark.unit
def test_usage_line_states_zero_cost_without_meta():
    line = usage_line(None, "unscheduling")
    assert line.startswith("**Usage:** 0 credits used")
    assert "unscheduling" in line


@pytest.mark.unit
@pytest.mark.parametrize("used, remaining", [(7, 4321), (0, 12), (250, 98765)])
def test_with_usage_appends_exactly_one_usage_line(used, remaining):
    report = with_usage("## Report\n\nbody\n", CreditUsage(used, remaining))

    assert report.count("**Usage:**") == 1
    assert report.count(f"{used} credit") == 1
    assert report.count(f"{remaining} remaining") == 1
    assert report.endswith(f"{remaining} remaining")


@pytest.mark.unit
def test_format_product_shows_placeholders():
    text = format_product(Product(title="Widget", brand="Acme"))

    assert "**Widget**" in text
    assert "- Brand: Acme" in text
    assert "- Category: N/A" in text
    assert "- Amazon ASIN: N/A" in text
    assert "**Images:** 0 available" in text


@pytest.mark.unit
def test_format_product_batch_numbers_from_one():
    text = format_product_batch([Product(title="First"), Product(title="Second")])

    assert "Found 2 Products" in text
    assert text.index("### 1. First") < text.index("### 2. Second")


@pytest.mark.unit
def test_format_offers_sorts_and_marks_missing_price():
    product = ProductOffers(
        title="Widget",
        offers=[
            Offer(retailer="nopricemart.com", price=None),
            Offer(retailer="bestbuy.com", price=24.5, seller="Best Buy"),
            Offer(retailer="amazon.com", price=19.99),
        ],
    )

    text = format_offers(product)

    assert "**3 offers found:**" in text
    assert text.index("amazon.com") < text.index("bestbuy.com") < text.index("nopricemart.com")
    assert "1. **amazon.com** - $19.99" in text
    assert "3. **nopricemart.com** - Price unavailable" in text
    assert "   - Seller: Best Buy" in text


@pytest.mark.unit
def test_format_offers_without_offers():
    assert "No current offers available" in format_offers(ProductOffers(title="Widget"))


@pytest.mark.unit
def test_format_retailer_offers_keeps_upstream_order():
    product = ProductOffers(
        title="Widget",
        offers=[Offer(retailer="target.com", price=30.0), Offer(retailer="target.com", price=10.0)],
    )

    text = format_retailer_offers(product, "target.com")

    assert text.startswith("## 💰 target.com Offers for Widget")
    assert text.index("$30.00") < text.index("$10.00")


@pytest.mark.unit
def test_format_price_history_lists_points_per_retailer():
    product = ProductHistory(
        title="Widget",
        offers=[
            OfferHistory(
                retailer="amazon.com",
                points=[
                    HistoryPoint("2024-01-02T10:00:00Z", 21.0, "in stock"),
                    HistoryPoint("2024-01-01T10:00:00Z", None, "out of stock"),
                ],
            ),
            OfferHistory(retailer="target.com"),
        ],
    )

    text = format_price_history(product, "2024-01-01", "2024-01-31")

    assert "**Period:** 2024-01-01 to 2024-01-31" in text
    assert "- 2024-01-02: $21.00 (in stock)" in text
    assert "- 2024-01-01: N/A (out of stock)" in text
    assert text.index("2024-01-02:") < text.index("2024-01-01:")
    assert "### target.com\nNo historical data available" in text


@pytest.mark.unit
def test_format_date_falls_back_to_raw_text():
    assert format_date("yesterday") == "yesterday"
    assert format_date("2024-05-06") == "2024-05-06"


@pytest.mark.unit
def test_format_schedule_list_groups_in_first_seen_order():
    entries = [
        ScheduleEntry("A", "1", "daily", barcode="0001"),
        ScheduleEntry("B", "2", "hourly", retailer="amazon.com"),
        ScheduleEntry("C", "3", "daily", asin="B0C"),
    ]

    text = format_schedule_list(entries)

    assert "(3 total)" in text
    assert text.index("### Daily (2)") < text.index("### Hourly (1)")
    daily = text[text.index("### Daily (2)"):text.index("### Hourly (1)")]
    assert daily.index("**A**") < daily.index("**C**")
    assert "   - Retailer Filter: amazon.com" in text
    assert "   - Barcode: 0001" in text


@pytest.mark.unit
@pytest.mark.parametrize(
    "percentage, marker",
    [(95, "High Usage Warning"), (90, "High Usage Warning"), (80.5, "Usage Notice"), (12, "Good")],
)
def test_format_usage_status_thresholds(percentage, marker):
    usage = UsagePeriod("2024-01-01", "2024-01-31", 12500, 20000, 7500, 4321, percentage)

    text = format_usage(usage)

    assert marker in text
    assert "- Used: 12,500 credits" in text
    assert "- Limit: 20,000 credits" in text
    assert "**Requests Made:** 4,321" in text
