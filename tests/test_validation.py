"""Unit tests for the input validation layer."""

from decimal import Decimal

import pytest
from pydantic_core import PydanticCustomError

from stockledger.core.exceptions import ValidationError
from stockledger.core.validation import CommonValidators, is_valid_object_id, validate_input
from stockledger.modules.products.schemas import (
    LowStockQuery, ProductCreate, ProductFilter, ProductUpdate, SellProductInput, StockStatus
)
from stockledger.modules.suppliers.schemas import SupplierCreate, SupplierUpdate
from stockledger.modules.transactions.schemas import RecentQuery, TransactionFilter
from stockledger.modules.transactions.periods import TransactionPeriod

VALID_ID = "65a1b2c3d4e5f6a7b8c9d0e1"


def _product(**overrides):
    data = {"name": "Widget", "price": 2.5, "stock_quantity": 10, "supplier_id": VALID_ID}
    data.update(overrides)
    return data


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------


def test_name_is_trimmed():
    assert CommonValidators.validate_name("  Widget  ") == "Widget"


@pytest.mark.parametrize("value", ["a", " b ", "x" * 101])
def test_name_length_bounds(value):
    with pytest.raises(PydanticCustomError):
        CommonValidators.validate_name(value)


@pytest.mark.parametrize("value", [True, "2.50", float("nan"), None])
def test_price_rejects_non_numbers(value):
    with pytest.raises(PydanticCustomError) as excinfo:
        CommonValidators.validate_price(value)
    assert "Price must be a number" in str(excinfo.value)


def test_price_minimum():
    with pytest.raises(PydanticCustomError) as excinfo:
        CommonValidators.validate_price(0)
    assert "at least $0.01" in str(excinfo.value)


def test_price_is_quantized_to_cents():
    assert CommonValidators.validate_price(2.5) == Decimal("2.50")
    assert CommonValidators.validate_price(Decimal("0.01")) == Decimal("0.01")


def test_stock_quantity_accepts_integral_float():
    assert CommonValidators.validate_stock_quantity(4.0) == 4
    assert CommonValidators.validate_stock_quantity(0) == 0


def test_stock_quantity_rejects_fraction_and_negative():
    with pytest.raises(PydanticCustomError) as excinfo:
        CommonValidators.validate_stock_quantity(2.5)
    assert "whole number" in str(excinfo.value)

    with pytest.raises(PydanticCustomError) as excinfo:
        CommonValidators.validate_stock_quantity(-1)
    assert "0 or greater" in str(excinfo.value)


def test_sell_quantity_minimum():
    with pytest.raises(PydanticCustomError) as excinfo:
        CommonValidators.validate_sell_quantity(0)
    assert str(excinfo.value) == "Quantity must be at least 1"


@pytest.mark.parametrize("validator", [
    CommonValidators.validate_stock_quantity,
    CommonValidators.validate_sell_quantity,
])
def test_whole_numbers_fit_integer_columns(validator):
    assert validator(2**31 - 1) == 2**31 - 1

    with pytest.raises(PydanticCustomError) as excinfo:
        validator(10**20)
    assert excinfo.value.type == "too_big"


def test_email_is_normalized():
    assert CommonValidators.validate_email("  Jane@ACME.com ") == "jane@acme.com"


@pytest.mark.parametrize("value", ["jane", "jane@acme", "ja ne@acme.com", "@acme.com"])
def test_email_shape(value):
    with pytest.raises(PydanticCustomError):
        CommonValidators.validate_email(value)


def test_object_id_format():
    assert is_valid_object_id(VALID_ID)
    assert is_valid_object_id(VALID_ID.upper())
    assert not is_valid_object_id("not-an-id")
    assert not is_valid_object_id(VALID_ID + "0")
    assert not is_valid_object_id(None)


def test_limit_is_coerced():
    assert CommonValidators.validate_limit("20", 10) == 20
    assert CommonValidators.validate_limit(None, 10) == 10


@pytest.mark.parametrize("value", [0, 101, "abc"])
def test_limit_bounds(value):
    with pytest.raises(PydanticCustomError):
        CommonValidators.validate_limit(value, 10)


# ---------------------------------------------------------------------------
# Schemas through validate_input
# ---------------------------------------------------------------------------


def test_product_create_valid_input():
    product = validate_input(ProductCreate, _product(name="  Widget "))

    assert product.name == "Widget"
    assert product.price == Decimal("2.50")
    assert product.stock_quantity == 10
    assert product.supplier_id == VALID_ID


def test_unknown_fields_are_ignored():
    product = validate_input(ProductCreate, _product(color="red"))
    assert not hasattr(product, "color")


def test_missing_field_reports_field_name():
    data = _product()
    del data["price"]

    with pytest.raises(ValidationError) as excinfo:
        validate_input(ProductCreate, data)

    assert excinfo.value.field == "price"
    assert excinfo.value.message == "price is required"


def test_validation_error_collects_every_violation():
    with pytest.raises(ValidationError) as excinfo:
        validate_input(ProductCreate, _product(name="x", price=True, supplier_id="bad"))

    fields = {detail["field"] for detail in excinfo.value.details}
    assert fields == {"name", "price", "supplier_id"}
    assert excinfo.value.field == "name"


def test_non_mapping_input_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        validate_input(ProductCreate, ["Widget"])
    assert excinfo.value.message == "Input must be an object"


def test_update_only_keeps_present_fields():
    patch = validate_input(ProductUpdate, {"price": 3}).model_dump(exclude_unset=True)
    assert patch == {"price": Decimal("3.00")}


def test_update_rejects_explicit_null():
    with pytest.raises(ValidationError) as excinfo:
        validate_input(SupplierUpdate, {"name": None})
    assert excinfo.value.field == "name"


def test_empty_update_is_valid():
    assert validate_input(SupplierUpdate, {}).model_dump(exclude_unset=True) == {}


def test_supplier_address_defaults_to_empty():
    supplier = validate_input(SupplierCreate, {
        "name": "Acme",
        "contact_person": "Jane Doe",
        "email": "jane@acme.com",
        "phone": " 555 ",
    })
    assert supplier.address == ""
    assert supplier.phone == "555"


def test_supplier_phone_required():
    with pytest.raises(ValidationError) as excinfo:
        validate_input(SupplierCreate, {
            "name": "Acme",
            "contact_person": "Jane Doe",
            "email": "jane@acme.com",
            "phone": "   ",
        })
    assert excinfo.value.message == "Phone number is required"


def test_sell_input():
    assert validate_input(SellProductInput, {"quantity": 3}).quantity == 3
    with pytest.raises(ValidationError):
        validate_input(SellProductInput, {"quantity": 1.5})


def test_filters_parse_enums_and_defaults():
    product_filter = validate_input(ProductFilter, {"stock_status": "low-stock", "search": "  "})
    assert product_filter.stock_status == StockStatus.LOW_STOCK
    assert product_filter.search is None

    transaction_filter = validate_input(TransactionFilter, {"period": "week"})
    assert transaction_filter.period == TransactionPeriod.WEEK

    assert validate_input(LowStockQuery, {}).limit == 5
    assert validate_input(RecentQuery, {"limit": None}).limit == 10


def test_invalid_enum_values_are_rejected():
    with pytest.raises(ValidationError) as excinfo:
        validate_input(ProductFilter, {"stock_status": "plenty"})
    assert excinfo.value.message.startswith("Invalid stock status")

    with pytest.raises(ValidationError) as excinfo:
        validate_input(TransactionFilter, {"period": "year"})
    assert excinfo.value.message == "Invalid period. Must be: today, week, or month"
