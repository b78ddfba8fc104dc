import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from stockledger.core.validation import is_valid_object_id, to_cents
from stockledger.shared.database.filters import LIKE_ESCAPE, apply_date_range, contains_pattern
from stockledger.shared.database.models import Transaction

logger = logging.getLogger(__name__)


def _to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class TransactionRepository:
    """
    Repositorio de transacciones de venta.

    Las transacciones no se modifican: solo se crean desde una venta
    y pueden eliminarse para corregir errores.
    """

    def __init__(self, db: Session):
        self.db = db

    # ===== CRUD BÁSICO =====

    def create(self, user_id: str, transaction_data: Dict[str, Any]) -> Transaction:
        """Registrar transacción de venta"""
        try:
            transaction = Transaction(
                user_id=user_id,
                product_id=transaction_data["product_id"],
                product_name=transaction_data["product_name"],
                quantity=transaction_data["quantity"],
                unit_price=transaction_data["unit_price"],
                total_amount=transaction_data["total_amount"]
            )
            self.db.add(transaction)
            self.db.commit()
            self.db.refresh(transaction)
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Transaction created - id: {transaction.id}, user: {user_id}, "
            f"product: {transaction.product_name}, total: {transaction.total_amount}"
        )
        return transaction

    def find_many(
        self,
        user_id: str,
        search: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        product_id: Optional[str] = None
    ) -> List[Transaction]:
        """Transacciones del usuario, más recientes primero"""
        query = self.db.query(Transaction).filter(Transaction.user_id == user_id)
        query = apply_date_range(query, Transaction.created_at, start_date, end_date)

        if product_id:
            query = query.filter(Transaction.product_id == product_id.lower())

        if search and search.strip():
            query = query.filter(
                Transaction.product_name.ilike(contains_pattern(search.strip()), escape=LIKE_ESCAPE)
            )

        return query.order_by(desc(Transaction.created_at)).all()

    def find_by_id(self, user_id: str, transaction_id: str) -> Optional[Transaction]:
        if not is_valid_object_id(transaction_id):
            logger.debug(f"Invalid transaction ID format: {transaction_id!r}")
            return None

        return self.db.query(Transaction).filter(
            Transaction.id == transaction_id.lower(),
            Transaction.user_id == user_id
        ).first()

    def delete(self, user_id: str, transaction_id: str) -> bool:
        """True si se eliminó exactamente un registro. No repone stock."""
        if not is_valid_object_id(transaction_id):
            logger.debug(f"Invalid transaction ID format: {transaction_id!r}")
            return False

        try:
            rows_deleted = self.db.query(Transaction).filter(
                Transaction.id == transaction_id.lower(),
                Transaction.user_id == user_id
            ).delete(synchronize_session=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if rows_deleted == 1:
            logger.info(f"Transaction deleted - id: {transaction_id}, user: {user_id}")
            return True
        return False

    # ===== REPORTES =====

    def get_stats(
        self,
        user_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Ingresos, número de ventas, unidades y ticket promedio del rango"""
        query = self.db.query(
            func.coalesce(func.sum(Transaction.total_amount), 0).label("total_revenue"),
            func.count(Transaction.id).label("total_transactions"),
            func.coalesce(func.sum(Transaction.quantity), 0).label("total_items_sold")
        ).filter(Transaction.user_id == user_id)
        query = apply_date_range(query, Transaction.created_at, start_date, end_date)

        row = query.one()
        total_revenue = to_cents(_to_decimal(row.total_revenue))
        total_transactions = int(row.total_transactions or 0)

        if total_transactions > 0:
            average_order_value = to_cents(total_revenue / total_transactions)
        else:
            average_order_value = Decimal("0.00")

        return {
            "total_revenue": total_revenue,
            "total_transactions": total_transactions,
            "total_items_sold": int(row.total_items_sold or 0),
            "average_order_value": average_order_value
        }

    def get_daily_sales(
        self,
        user_id: str,
        start_date: datetime,
        end_date: datetime
    ) -> List[Dict[str, Any]]:
        """
        Ventas agrupadas por día local, del más reciente al más antiguo.
        Los días sin ventas no aparecen.
        """
        day = func.date(Transaction.created_at).label("day")

        rows = self.db.query(
            day,
            func.sum(Transaction.total_amount).label("total_amount"),
            func.count(Transaction.id).label("transaction_count"),
            func.sum(Transaction.quantity).label("items_sold")
        ).filter(
            Transaction.user_id == user_id,
            Transaction.created_at >= start_date,
            Transaction.created_at <= end_date
        ).group_by(day).order_by(desc(day)).all()

        return [
            {
                "date": str(row.day),
                "total_amount": to_cents(_to_decimal(row.total_amount)),
                "transaction_count": int(row.transaction_count),
                "items_sold": int(row.items_sold or 0)
            }
            for row in rows
        ]

    def get_recent(self, user_id: str, limit: int = 10) -> List[Transaction]:
        return self.db.query(Transaction).filter(
            Transaction.user_id == user_id
        ).order_by(desc(Transaction.created_at)).limit(limit).all()

    def count(self, user_id: str) -> int:
        return self.db.query(func.count(Transaction.id)).filter(
            Transaction.user_id == user_id
        ).scalar() or 0
