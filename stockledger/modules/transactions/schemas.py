from typing import Any, List, Optional

from pydantic import field_validator
from pydantic_core import PydanticCustomError

from stockledger.core.validation import CommonValidators, InputSchema
from stockledger.shared.database.models import Transaction
from stockledger.shared.schemas import LedgerBaseModel, to_iso, to_money
from .periods import TransactionPeriod

DEFAULT_RECENT_LIMIT = 10

# ==================== REQUEST SCHEMAS ====================

class PeriodQuery(InputSchema):
    """
    Periodo predefinido o fechas explícitas.

    Las fechas se reciben como texto; una fecha no interpretable deja
    ese extremo del rango abierto.
    """
    period: Optional[TransactionPeriod] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @field_validator("period", mode="before")
    @classmethod
    def validate_period(cls, v: Any):
        return CommonValidators.validate_choice(
            v, TransactionPeriod, "Invalid period. Must be: today, week, or month"
        )

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def validate_date_text(cls, v: Any):
        if v is None:
            return None
        if not isinstance(v, str):
            raise PydanticCustomError("invalid_type", "Date must be a string")
        return v.strip() or None


class TransactionFilter(PeriodQuery):
    search: Optional[str] = None
    product_id: Optional[str] = None

    @field_validator("search", mode="before")
    @classmethod
    def validate_search(cls, v: Any):
        return CommonValidators.validate_search(v)

    @field_validator("product_id", mode="before")
    @classmethod
    def validate_product_id(cls, v: Any):
        if v is None or v == "":
            return None
        return CommonValidators.validate_object_id(v, "Product ID")


class RecentQuery(InputSchema):
    limit: int = DEFAULT_RECENT_LIMIT

    @field_validator("limit", mode="before")
    @classmethod
    def validate_limit(cls, v: Any):
        return CommonValidators.validate_limit(v, DEFAULT_RECENT_LIMIT)

# ==================== RESPONSE SCHEMAS ====================

class TransactionResponse(LedgerBaseModel):
    id: str
    user_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    total_amount: float
    created_at: str


class TransactionStats(LedgerBaseModel):
    total_revenue: float
    total_transactions: int
    total_items_sold: int
    average_order_value: float


class DailySales(LedgerBaseModel):
    date: str
    total_amount: float
    transaction_count: int
    items_sold: int


class ReportPeriod(LedgerBaseModel):
    start_date: str
    end_date: str


class DailySalesResult(LedgerBaseModel):
    daily_sales: List[DailySales]
    period: ReportPeriod


def to_transaction_response(transaction: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=str(transaction.id),
        user_id=transaction.user_id,
        product_id=transaction.product_id,
        product_name=transaction.product_name,
        quantity=transaction.quantity,
        unit_price=to_money(transaction.unit_price),
        total_amount=to_money(transaction.total_amount),
        created_at=to_iso(transaction.created_at)
    )
