import logging
from typing import Any, List

from sqlalchemy.orm import Session

from stockledger.core.exceptions import BusinessRuleError, NotFoundError
from stockledger.core.validation import validate_input
from stockledger.modules.products.repository import ProductRepository
from .repository import SupplierRepository
from .schemas import (
    SupplierCreate, SupplierFilter, SupplierResponse, SupplierUpdate,
    to_supplier_response
)

logger = logging.getLogger(__name__)


class SupplierService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = SupplierRepository(db)
        self.product_repository = ProductRepository(db)

    def create_supplier(self, user_id: str, data: Any) -> SupplierResponse:
        """Validar y crear proveedor"""
        supplier_data = validate_input(SupplierCreate, data)
        supplier = self.repository.create(user_id, supplier_data)
        return to_supplier_response(supplier)

    def list_suppliers(self, user_id: str, filters: Any = None) -> List[SupplierResponse]:
        supplier_filter = validate_input(SupplierFilter, filters)
        suppliers = self.repository.find_many(user_id, supplier_filter.search)
        return [to_supplier_response(s) for s in suppliers]

    def get_supplier(self, user_id: str, supplier_id: str) -> SupplierResponse:
        supplier = self.repository.find_by_id(user_id, supplier_id)
        if not supplier:
            raise NotFoundError("Supplier", supplier_id)
        return to_supplier_response(supplier)

    def update_supplier(self, user_id: str, supplier_id: str, data: Any) -> SupplierResponse:
        """Actualización parcial: solo los campos enviados"""
        update_data = validate_input(SupplierUpdate, data).model_dump(exclude_unset=True)

        supplier = self.repository.update(user_id, supplier_id, update_data)
        if not supplier:
            raise NotFoundError("Supplier", supplier_id)
        return to_supplier_response(supplier)

    def delete_supplier(self, user_id: str, supplier_id: str) -> None:
        """
        Eliminar proveedor.

        No se permite mientras existan productos que lo referencian.
        """
        supplier = self.repository.find_by_id(user_id, supplier_id)
        if not supplier:
            raise NotFoundError("Supplier", supplier_id)

        product_count = self.product_repository.count_by_supplier(user_id, supplier.id)
        if product_count > 0:
            logger.info(
                f"Supplier delete blocked - id: {supplier.id}, user: {user_id}, products: {product_count}"
            )
            raise BusinessRuleError(
                f"Cannot delete supplier '{supplier.name}': {product_count} product(s) still reference it"
            )

        if not self.repository.delete(user_id, supplier_id):
            raise NotFoundError("Supplier", supplier_id)

    def list_supplier_names(self, user_id: str) -> List[str]:
        return self.repository.get_names(user_id)
