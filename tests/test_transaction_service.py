"""Service-level tests for transaction listing and reporting."""

from datetime import datetime

import pytest

from stockledger.core.exceptions import NotFoundError, ValidationError
from stockledger.modules.transactions.service import TransactionService

from conftest import MISSING_ID, OTHER_TENANT, TENANT

# Wednesday; the week runs Sunday 2024-03-10 .. Saturday 2024-03-16
NOW = datetime(2024, 3, 13, 12, 0, 0)


@pytest.fixture
def service(db):
    return TransactionService(db, clock=lambda: NOW)


def test_list_transactions_newest_first(service, add_transaction):
    add_transaction(datetime(2024, 3, 11, 9, 0), product_name="Monday")
    add_transaction(datetime(2024, 3, 12, 9, 0), product_name="Tuesday")
    add_transaction(datetime(2024, 3, 12, 9, 0), user_id=OTHER_TENANT, product_name="Foreign")

    names = [t.product_name for t in service.list_transactions(TENANT)]

    assert names == ["Tuesday", "Monday"]


def test_list_transactions_by_period(service, add_transaction):
    add_transaction(datetime(2024, 3, 13, 0, 0), product_name="Today early")
    add_transaction(datetime(2024, 3, 13, 23, 59, 59), product_name="Today late")
    add_transaction(datetime(2024, 3, 10, 0, 0), product_name="Sunday")
    add_transaction(datetime(2024, 3, 9, 23, 59, 59), product_name="Last Saturday")
    add_transaction(datetime(2024, 3, 1, 0, 0), product_name="First of month")
    add_transaction(datetime(2024, 2, 29, 12, 0), product_name="February")

    def names(period):
        return {t.product_name for t in service.list_transactions(TENANT, {"period": period})}

    assert names("today") == {"Today early", "Today late"}
    assert names("week") == {"Today early", "Today late", "Sunday"}
    assert names("month") == {
        "Today early", "Today late", "Sunday", "Last Saturday", "First of month"
    }


def test_list_transactions_by_explicit_dates(service, add_transaction):
    add_transaction(datetime(2024, 3, 1, 8, 0), product_name="March 1")
    add_transaction(datetime(2024, 3, 2, 22, 0), product_name="March 2 late")
    add_transaction(datetime(2024, 3, 3, 8, 0), product_name="March 3")

    result = service.list_transactions(TENANT, {"start_date": "2024-03-01", "end_date": "2024-03-02"})
    assert {t.product_name for t in result} == {"March 1", "March 2 late"}

    open_end = service.list_transactions(TENANT, {"start_date": "2024-03-02", "end_date": "nonsense"})
    assert {t.product_name for t in open_end} == {"March 2 late", "March 3"}


def test_out_of_range_aware_date_leaves_bound_open(service, add_transaction):
    add_transaction(datetime(2024, 3, 1, 8, 0), product_name="March 1")

    result = service.list_transactions(TENANT, {"start_date": "0001-01-01T00:00:00+14:00"})

    assert [t.product_name for t in result] == ["March 1"]


def test_list_transactions_search_and_product(service, add_transaction):
    product_id = "a" * 24
    add_transaction(NOW, product_name="Blue Widget", product_id=product_id)
    add_transaction(NOW, product_name="Red Gadget")

    assert [t.product_name for t in service.list_transactions(TENANT, {"search": "widget"})] == ["Blue Widget"]
    assert [t.product_id for t in service.list_transactions(TENANT, {"product_id": product_id})] == [product_id]


def test_list_transactions_invalid_period(service):
    with pytest.raises(ValidationError):
        service.list_transactions(TENANT, {"period": "decade"})


def test_get_transaction(service, add_transaction):
    transaction = add_transaction(NOW, quantity=2, unit_price="3.50")

    response = service.get_transaction(TENANT, transaction.id)

    assert response.quantity == 2
    assert response.unit_price == 3.5
    assert response.total_amount == 7.0
    assert response.created_at == NOW.isoformat()

    with pytest.raises(NotFoundError):
        service.get_transaction(OTHER_TENANT, transaction.id)
    with pytest.raises(NotFoundError):
        service.get_transaction(TENANT, "xyz")


def test_transaction_stats(service, add_transaction):
    add_transaction(datetime(2024, 3, 11, 10, 0), quantity=2, unit_price="5.00")
    add_transaction(datetime(2024, 3, 12, 10, 0), quantity=1, unit_price="20.00")
    add_transaction(datetime(2024, 3, 13, 10, 0), quantity=3, unit_price="1.00")
    add_transaction(datetime(2024, 2, 1, 10, 0), quantity=10, unit_price="100.00")

    week = service.get_transaction_stats(TENANT, {"period": "week"})
    assert week.total_revenue == 33.00
    assert week.total_transactions == 3
    assert week.total_items_sold == 6
    assert week.average_order_value == 11.00

    everything = service.get_transaction_stats(TENANT)
    assert everything.total_transactions == 4
    assert everything.total_revenue == 1033.00


def test_transaction_stats_empty(service):
    stats = service.get_transaction_stats(TENANT, {"period": "today"})

    assert stats.total_revenue == 0
    assert stats.total_transactions == 0
    assert stats.total_items_sold == 0
    assert stats.average_order_value == 0


def test_daily_sales_groups_by_day_without_gap_filling(service, add_transaction):
    add_transaction(datetime(2024, 3, 11, 9, 0), quantity=1, unit_price="10.00")
    add_transaction(datetime(2024, 3, 11, 17, 0), quantity=2, unit_price="10.00")
    add_transaction(datetime(2024, 3, 13, 8, 0), quantity=1, unit_price="5.00")

    result = service.get_daily_sales(TENANT, {"period": "week"})

    assert [day.date for day in result.daily_sales] == ["2024-03-13", "2024-03-11"]
    monday = result.daily_sales[1]
    assert monday.total_amount == 30.00
    assert monday.transaction_count == 2
    assert monday.items_sold == 3
    assert result.period.start_date == "2024-03-10T00:00:00"
    assert result.period.end_date == "2024-03-16T23:59:59.999000"


def test_daily_sales_defaults_to_current_week(service, add_transaction):
    add_transaction(datetime(2024, 3, 12, 9, 0))
    add_transaction(datetime(2024, 3, 2, 9, 0))

    result = service.get_daily_sales(TENANT)

    assert [day.date for day in result.daily_sales] == ["2024-03-12"]
    assert result.period.start_date == "2024-03-10T00:00:00"


def test_recent_transactions_limit(service, add_transaction):
    for day in range(1, 13):
        add_transaction(datetime(2024, 3, day, 12, 0), product_name=f"Day {day}")

    assert len(service.get_recent_transactions(TENANT)) == 10
    recent = service.get_recent_transactions(TENANT, {"limit": 3})
    assert [t.product_name for t in recent] == ["Day 12", "Day 11", "Day 10"]

    with pytest.raises(ValidationError):
        service.get_recent_transactions(TENANT, {"limit": 0})


def test_delete_transaction(service, add_transaction):
    transaction = add_transaction(NOW)
    transaction_id = transaction.id

    with pytest.raises(NotFoundError):
        service.delete_transaction(OTHER_TENANT, transaction_id)

    service.delete_transaction(TENANT, transaction_id)

    with pytest.raises(NotFoundError):
        service.get_transaction(TENANT, transaction_id)
    with pytest.raises(NotFoundError):
        service.delete_transaction(TENANT, MISSING_ID)


def test_delete_transaction_does_not_restore_stock(db, make_product):
    from stockledger.modules.products.service import ProductService

    products = ProductService(db)
    product = make_product(stock_quantity=5)
    sale = products.sell_product(TENANT, product.id, {"quantity": 2})

    TransactionService(db).delete_transaction(TENANT, sale.transaction_id)

    assert products.get_product(TENANT, product.id).stock_quantity == 3
