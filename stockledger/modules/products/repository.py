import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, asc, desc, func, or_
from sqlalchemy.orm import Session

from stockledger.config.settings import settings
from stockledger.core.validation import is_valid_object_id, to_cents
from stockledger.shared.database.filters import LIKE_ESCAPE, contains_pattern
from stockledger.shared.database.models import Product, Supplier
from .schemas import ProductCreate, StockStatus

logger = logging.getLogger(__name__)


class ProductRepository:
    """
    Repositorio de productos. Todas las consultas filtran por user_id.
    """

    def __init__(self, db: Session, low_stock_threshold: Optional[int] = None):
        self.db = db
        self.low_stock_threshold = (
            settings.low_stock_threshold if low_stock_threshold is None else low_stock_threshold
        )

    # ===== CRUD BÁSICO =====

    def create(self, user_id: str, data: ProductCreate) -> Product:
        """Crear nuevo producto"""
        try:
            product = Product(
                user_id=user_id,
                name=data.name.strip(),
                price=data.price,
                stock_quantity=data.stock_quantity,
                supplier_id=data.supplier_id
            )
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Product created - id: {product.id}, user: {user_id}, "
            f"name: {product.name}, supplier: {product.supplier_id}"
        )
        return product

    def find_many(
        self,
        user_id: str,
        search: Optional[str] = None,
        stock_status: Optional[StockStatus] = None,
        supplier_id: Optional[str] = None
    ) -> List[Product]:
        """
        Productos del usuario, más recientes primero.

        search busca en el nombre del producto o del proveedor.
        """
        query = self.db.query(Product).filter(Product.user_id == user_id)

        if stock_status == StockStatus.IN_STOCK:
            query = query.filter(Product.stock_quantity >= self.low_stock_threshold)
        elif stock_status == StockStatus.LOW_STOCK:
            query = query.filter(
                Product.stock_quantity > 0,
                Product.stock_quantity < self.low_stock_threshold
            )
        elif stock_status == StockStatus.OUT_OF_STOCK:
            query = query.filter(Product.stock_quantity == 0)

        if supplier_id:
            query = query.filter(Product.supplier_id == supplier_id.lower())

        if search and search.strip():
            pattern = contains_pattern(search.strip())
            query = query.outerjoin(
                Supplier,
                and_(Supplier.id == Product.supplier_id, Supplier.user_id == Product.user_id)
            ).filter(or_(
                Product.name.ilike(pattern, escape=LIKE_ESCAPE),
                Supplier.name.ilike(pattern, escape=LIKE_ESCAPE)
            ))

        return query.order_by(desc(Product.created_at)).all()

    def find_by_id(self, user_id: str, product_id: str) -> Optional[Product]:
        """Obtener producto por ID (None si no existe, es ajeno o el ID es inválido)"""
        if not is_valid_object_id(product_id):
            logger.debug(f"Invalid product ID format: {product_id!r}")
            return None

        return self.db.query(Product).filter(
            Product.id == product_id.lower(),
            Product.user_id == user_id
        ).first()

    def update(self, user_id: str, product_id: str, data: Dict[str, Any]) -> Optional[Product]:
        """
        Actualizar solo los campos presentes.
        Sin campos, devuelve el estado actual.
        """
        update_data = {key: value for key, value in data.items() if value is not None}

        if not update_data:
            return self.find_by_id(user_id, product_id)

        if not is_valid_object_id(product_id):
            logger.debug(f"Invalid product ID format: {product_id!r}")
            return None

        if "name" in update_data:
            update_data["name"] = update_data["name"].strip()
        update_data["updated_at"] = datetime.now()

        try:
            rows_updated = self.db.query(Product).filter(
                Product.id == product_id.lower(),
                Product.user_id == user_id
            ).update(update_data, synchronize_session=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if rows_updated == 0:
            return None

        logger.info(
            f"Product updated - id: {product_id}, user: {user_id}, "
            f"fields: {sorted(k for k in update_data if k != 'updated_at')}"
        )
        return self.find_by_id(user_id, product_id)

    def delete(self, user_id: str, product_id: str) -> bool:
        """True si se eliminó exactamente un registro"""
        if not is_valid_object_id(product_id):
            logger.debug(f"Invalid product ID format: {product_id!r}")
            return False

        try:
            rows_deleted = self.db.query(Product).filter(
                Product.id == product_id.lower(),
                Product.user_id == user_id
            ).delete(synchronize_session=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if rows_deleted == 1:
            logger.info(f"Product deleted - id: {product_id}, user: {user_id}")
            return True
        return False

    # ===== VENTA =====

    def sell(self, user_id: str, product_id: str, quantity: int) -> Optional[Product]:
        """
        Descontar stock de forma atómica.

        Un único UPDATE condicionado a stock_quantity >= quantity: si otra
        venta se adelantó y ya no alcanza, no se modifica nada y se devuelve None.
        """
        if not is_valid_object_id(product_id):
            logger.debug(f"Invalid product ID format: {product_id!r}")
            return None

        try:
            rows_updated = self.db.query(Product).filter(
                Product.id == product_id.lower(),
                Product.user_id == user_id,
                Product.stock_quantity >= quantity
            ).update({
                Product.stock_quantity: Product.stock_quantity - quantity,
                Product.updated_at: datetime.now()
            }, synchronize_session=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if rows_updated == 0:
            logger.info(
                f"Product sell rejected - id: {product_id}, user: {user_id}, quantity: {quantity}"
            )
            return None

        product = self.find_by_id(user_id, product_id)
        if product is not None:
            logger.info(
                f"Product sold - id: {product_id}, user: {user_id}, "
                f"quantity: {quantity}, remaining: {product.stock_quantity}"
            )
        return product

    # ===== ESTADÍSTICAS Y CONSULTAS DERIVADAS =====

    def get_stats(self, user_id: str) -> Dict[str, Any]:
        """Resumen del inventario del usuario"""
        products = self.db.query(Product.price, Product.stock_quantity).filter(
            Product.user_id == user_id
        ).all()

        total_value = Decimal("0")
        total_units = 0
        low_stock_count = 0
        out_of_stock_count = 0

        for price, stock in products:
            total_units += stock
            total_value += Decimal(price) * stock
            if stock == 0:
                out_of_stock_count += 1
            elif stock < self.low_stock_threshold:
                low_stock_count += 1

        return {
            "total_products": len(products),
            "total_units": total_units,
            "total_value": to_cents(total_value),
            "low_stock_count": low_stock_count,
            "out_of_stock_count": out_of_stock_count
        }

    def get_low_stock(self, user_id: str, limit: int = 5) -> List[Product]:
        """Productos con stock por debajo del umbral (incluye agotados), menor stock primero"""
        return self.db.query(Product).filter(
            Product.user_id == user_id,
            Product.stock_quantity < self.low_stock_threshold
        ).order_by(asc(Product.stock_quantity)).limit(limit).all()

    def get_supplier_ids(self, user_id: str) -> List[str]:
        """IDs de proveedor distintos referenciados por los productos"""
        rows = self.db.query(Product.supplier_id).filter(
            Product.user_id == user_id
        ).distinct().order_by(asc(Product.supplier_id)).all()
        return [row.supplier_id for row in rows]

    def count_by_supplier(self, user_id: str, supplier_id: str) -> int:
        return self.db.query(func.count(Product.id)).filter(
            Product.user_id == user_id,
            Product.supplier_id == supplier_id
        ).scalar() or 0

    def count(self, user_id: str) -> int:
        return self.db.query(func.count(Product.id)).filter(
            Product.user_id == user_id
        ).scalar() or 0
