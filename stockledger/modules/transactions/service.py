import logging
from datetime import datetime
from typing import Any, Callable, List, Optional

from sqlalchemy.orm import Session

from stockledger.core.exceptions import NotFoundError
from stockledger.core.validation import validate_input
from stockledger.shared.schemas import to_iso, to_money
from .periods import resolve_date_range, resolve_required_date_range
from .repository import TransactionRepository
from .schemas import (
    DailySales, DailySalesResult, PeriodQuery, RecentQuery, ReportPeriod,
    TransactionFilter, TransactionResponse, TransactionStats,
    to_transaction_response
)

logger = logging.getLogger(__name__)


class TransactionService:

    def __init__(self, db: Session, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.repository = TransactionRepository(db)
        self.clock = clock or datetime.now

    # ===== LISTADOS =====

    def list_transactions(self, user_id: str, filters: Any = None) -> List[TransactionResponse]:
        """
        Listar transacciones

        **Filtros disponibles:**
        - search: nombre del producto
        - period: today, week, month (tiene prioridad sobre las fechas)
        - start_date / end_date: fechas ISO
        - product_id
        """
        transaction_filter = validate_input(TransactionFilter, filters)
        date_range = resolve_date_range(
            transaction_filter.period,
            transaction_filter.start_date,
            transaction_filter.end_date,
            now=self.clock()
        )

        transactions = self.repository.find_many(
            user_id,
            search=transaction_filter.search,
            start_date=date_range.start_date,
            end_date=date_range.end_date,
            product_id=transaction_filter.product_id
        )
        return [to_transaction_response(t) for t in transactions]

    def get_transaction(self, user_id: str, transaction_id: str) -> TransactionResponse:
        transaction = self.repository.find_by_id(user_id, transaction_id)
        if not transaction:
            raise NotFoundError("Transaction", transaction_id)
        return to_transaction_response(transaction)

    def get_recent_transactions(self, user_id: str, query: Any = None) -> List[TransactionResponse]:
        limit = validate_input(RecentQuery, query).limit
        transactions = self.repository.get_recent(user_id, limit)
        return [to_transaction_response(t) for t in transactions]

    # ===== REPORTES =====

    def get_transaction_stats(self, user_id: str, query: Any = None) -> TransactionStats:
        """Estadísticas del periodo; sin periodo ni fechas abarca todo el historial"""
        period_query = validate_input(PeriodQuery, query)
        date_range = resolve_date_range(
            period_query.period,
            period_query.start_date,
            period_query.end_date,
            now=self.clock()
        )

        stats = self.repository.get_stats(user_id, date_range.start_date, date_range.end_date)
        return TransactionStats(
            total_revenue=to_money(stats["total_revenue"]),
            total_transactions=stats["total_transactions"],
            total_items_sold=stats["total_items_sold"],
            average_order_value=to_money(stats["average_order_value"])
        )

    def get_daily_sales(self, user_id: str, query: Any = None) -> DailySalesResult:
        """Ventas por día; el rango por defecto es la semana actual"""
        period_query = validate_input(PeriodQuery, query)
        date_range = resolve_required_date_range(
            period_query.period,
            period_query.start_date,
            period_query.end_date,
            now=self.clock()
        )

        daily_sales = self.repository.get_daily_sales(
            user_id, date_range.start_date, date_range.end_date
        )

        return DailySalesResult(
            daily_sales=[
                DailySales(
                    date=day["date"],
                    total_amount=to_money(day["total_amount"]),
                    transaction_count=day["transaction_count"],
                    items_sold=day["items_sold"]
                )
                for day in daily_sales
            ],
            period=ReportPeriod(
                start_date=to_iso(date_range.start_date),
                end_date=to_iso(date_range.end_date)
            )
        )

    # ===== CORRECCIONES =====

    def delete_transaction(self, user_id: str, transaction_id: str) -> None:
        """Eliminar transacción registrada por error. El stock no se repone."""
        if not self.repository.delete(user_id, transaction_id):
            raise NotFoundError("Transaction", transaction_id)
        logger.info(f"Transaction deleted via service - id: {transaction_id}, user: {user_id}")
