from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import field_validator

from stockledger.core.validation import CommonValidators, InputSchema
from stockledger.shared.database.models import Product
from stockledger.shared.schemas import LedgerBaseModel, to_iso, to_money


class StockStatus(str, Enum):
    ALL = "all"
    IN_STOCK = "in-stock"
    LOW_STOCK = "low-stock"
    OUT_OF_STOCK = "out-of-stock"


DEFAULT_LOW_STOCK_LIMIT = 5

# ==================== REQUEST SCHEMAS ====================

class ProductCreate(InputSchema):
    name: str
    price: Decimal
    stock_quantity: int
    supplier_id: str

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any):
        return CommonValidators.validate_name(v, "Product name")

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, v: Any):
        return CommonValidators.validate_price(v)

    @field_validator("stock_quantity", mode="before")
    @classmethod
    def validate_stock_quantity(cls, v: Any):
        return CommonValidators.validate_stock_quantity(v)

    @field_validator("supplier_id", mode="before")
    @classmethod
    def validate_supplier_id(cls, v: Any):
        return CommonValidators.validate_object_id(v, "Supplier ID")


class ProductUpdate(InputSchema):
    """Solo se validan y aplican los campos presentes"""
    name: Optional[str] = None
    price: Optional[Decimal] = None
    stock_quantity: Optional[int] = None
    supplier_id: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any):
        return CommonValidators.validate_name(v, "Product name")

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, v: Any):
        return CommonValidators.validate_price(v)

    @field_validator("stock_quantity", mode="before")
    @classmethod
    def validate_stock_quantity(cls, v: Any):
        return CommonValidators.validate_stock_quantity(v)

    @field_validator("supplier_id", mode="before")
    @classmethod
    def validate_supplier_id(cls, v: Any):
        return CommonValidators.validate_object_id(v, "Supplier ID")


class SellProductInput(InputSchema):
    quantity: int

    @field_validator("quantity", mode="before")
    @classmethod
    def validate_quantity(cls, v: Any):
        return CommonValidators.validate_sell_quantity(v)


class ProductFilter(InputSchema):
    search: Optional[str] = None
    stock_status: Optional[StockStatus] = None
    supplier_id: Optional[str] = None

    @field_validator("search", mode="before")
    @classmethod
    def validate_search(cls, v: Any):
        return CommonValidators.validate_search(v)

    @field_validator("stock_status", mode="before")
    @classmethod
    def validate_stock_status(cls, v: Any):
        return CommonValidators.validate_choice(
            v, StockStatus,
            "Invalid stock status. Must be: all, in-stock, low-stock, or out-of-stock"
        )

    @field_validator("supplier_id", mode="before")
    @classmethod
    def validate_supplier_id(cls, v: Any):
        if v is None or v == "":
            return None
        return CommonValidators.validate_object_id(v, "Supplier ID")


class LowStockQuery(InputSchema):
    limit: int = DEFAULT_LOW_STOCK_LIMIT

    @field_validator("limit", mode="before")
    @classmethod
    def validate_limit(cls, v: Any):
        return CommonValidators.validate_limit(v, DEFAULT_LOW_STOCK_LIMIT)

# ==================== RESPONSE SCHEMAS ====================

class ProductResponse(LedgerBaseModel):
    id: str
    user_id: str
    name: str
    price: float
    stock_quantity: int
    supplier_id: str
    supplier_name: str
    created_at: str
    updated_at: str


class ProductStats(LedgerBaseModel):
    total_products: int
    total_units: int
    total_value: float
    low_stock_count: int
    out_of_stock_count: int


class SellProductResult(LedgerBaseModel):
    product: ProductResponse
    sold: int
    total_amount: float
    transaction_id: str


class LowStockResult(LedgerBaseModel):
    products: List[ProductResponse]
    threshold: int


def to_product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        user_id=product.user_id,
        name=product.name,
        price=to_money(product.price),
        stock_quantity=product.stock_quantity,
        supplier_id=str(product.supplier_id),
        supplier_name=product.supplier_name,
        created_at=to_iso(product.created_at),
        updated_at=to_iso(product.updated_at)
    )
