import logging
from typing import Any, List, Mapping

from sqlalchemy.orm import Session

from stockledger.core.exceptions import (
    InsufficientStockError, NotFoundError, OperationFailedError
)
from stockledger.core.validation import to_cents, validate_input
from stockledger.modules.suppliers.repository import SupplierRepository
from stockledger.modules.transactions.repository import TransactionRepository
from stockledger.shared.schemas import to_money
from .repository import ProductRepository
from .schemas import (
    LowStockQuery, LowStockResult, ProductCreate, ProductFilter,
    ProductResponse, ProductStats, ProductUpdate, SellProductInput,
    SellProductResult, to_product_response
)

logger = logging.getLogger(__name__)


class ProductService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = ProductRepository(db)
        self.supplier_repository = SupplierRepository(db)
        self.transaction_repository = TransactionRepository(db)

    # ===== LECTURA =====

    def list_products(self, user_id: str, filters: Any = None) -> List[ProductResponse]:
        """
        Listar productos con filtros opcionales

        Filtros: search (producto o proveedor), stock_status, supplier_id
        """
        product_filter = validate_input(ProductFilter, filters)
        products = self.repository.find_many(
            user_id,
            search=product_filter.search,
            stock_status=product_filter.stock_status,
            supplier_id=product_filter.supplier_id
        )
        return [to_product_response(p) for p in products]

    def get_product(self, user_id: str, product_id: str) -> ProductResponse:
        product = self.repository.find_by_id(user_id, product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        return to_product_response(product)

    def get_product_stats(self, user_id: str) -> ProductStats:
        stats = self.repository.get_stats(user_id)
        stats["total_value"] = to_money(stats["total_value"])
        return ProductStats(**stats)

    def get_low_stock_products(self, user_id: str, query: Any = None) -> LowStockResult:
        """Productos por debajo del umbral de stock bajo"""
        limit = validate_input(LowStockQuery, query).limit
        products = self.repository.get_low_stock(user_id, limit)
        return LowStockResult(
            products=[to_product_response(p) for p in products],
            threshold=self.repository.low_stock_threshold
        )

    def list_supplier_references(self, user_id: str) -> List[str]:
        """IDs de proveedor usados por los productos del usuario"""
        return self.repository.get_supplier_ids(user_id)

    # ===== ESCRITURA =====

    def create_product(self, user_id: str, data: Any) -> ProductResponse:
        """Validar, comprobar el proveedor y crear producto"""
        product_data = validate_input(ProductCreate, data)
        self._ensure_supplier(user_id, product_data.supplier_id)

        product = self.repository.create(user_id, product_data)
        logger.info(f"Product created via service - id: {product.id}, user: {user_id}")
        return to_product_response(product)

    def update_product(self, user_id: str, product_id: str, data: Any) -> ProductResponse:
        """Actualización parcial: solo los campos enviados"""
        update_data = validate_input(ProductUpdate, data).model_dump(exclude_unset=True)

        if update_data.get("supplier_id"):
            self._ensure_supplier(user_id, update_data["supplier_id"])

        product = self.repository.update(user_id, product_id, update_data)
        if not product:
            raise NotFoundError("Product", product_id)
        return to_product_response(product)

    def sell_product(self, user_id: str, product_id: str, data: Any) -> SellProductResult:
        """
        Vender producto: descontar stock y registrar la transacción.

        1. Validar cantidad
        2. Leer producto y tomar copia de id, nombre y precio
        3. Verificar stock disponible
        4. Descuento atómico (UPDATE condicionado)
        5. Registrar transacción con el precio copiado
        """
        if not isinstance(data, Mapping):
            data = {"quantity": data}
        quantity = validate_input(SellProductInput, data).quantity

        existing = self.repository.find_by_id(user_id, product_id)
        if not existing:
            raise NotFoundError("Product", product_id)

        # Copia previa al commit: el commit expira el objeto
        snapshot_id = existing.id
        snapshot_name = existing.name
        snapshot_price = existing.price
        available = existing.stock_quantity

        if quantity > available:
            raise InsufficientStockError(available, quantity)

        total_amount = to_cents(snapshot_price * quantity)

        product = self.repository.sell(user_id, snapshot_id, quantity)
        if not product:
            self._raise_sell_rejected(user_id, snapshot_id, quantity)

        # Sin lock entre el descuento y el registro: un fallo aquí deja el stock descontado
        transaction = self.transaction_repository.create(user_id, {
            "product_id": snapshot_id,
            "product_name": snapshot_name,
            "quantity": quantity,
            "unit_price": snapshot_price,
            "total_amount": total_amount
        })

        logger.info(
            f"Product sold via service - id: {snapshot_id}, user: {user_id}, quantity: {quantity}, "
            f"remaining: {product.stock_quantity}, transaction: {transaction.id}"
        )

        return SellProductResult(
            product=to_product_response(product),
            sold=quantity,
            total_amount=float(total_amount),
            transaction_id=transaction.id
        )

    def delete_product(self, user_id: str, product_id: str) -> None:
        if not self.repository.delete(user_id, product_id):
            raise NotFoundError("Product", product_id)
        logger.info(f"Product deleted via service - id: {product_id}, user: {user_id}")

    # ===== HELPERS =====

    def _raise_sell_rejected(self, user_id: str, product_id: str, quantity: int) -> None:
        """
        El UPDATE condicionado no afectó filas: otra venta se adelantó.
        Se informa el stock actual si es insuficiente.
        """
        current = self.repository.find_by_id(user_id, product_id)
        if current is not None and current.stock_quantity < quantity:
            raise InsufficientStockError(current.stock_quantity, quantity)
        raise OperationFailedError("Sell product", "Stock update failed")

    def _ensure_supplier(self, user_id: str, supplier_id: str) -> None:
        """El proveedor debe existir y pertenecer al mismo usuario"""
        if not self.supplier_repository.find_by_id(user_id, supplier_id):
            raise NotFoundError("Supplier", supplier_id)
