import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import asc, func, or_
from sqlalchemy.orm import Session

from stockledger.core.validation import is_valid_object_id
from stockledger.shared.database.filters import LIKE_ESCAPE, contains_pattern
from stockledger.shared.database.models import Supplier
from .schemas import SupplierCreate

logger = logging.getLogger(__name__)


class SupplierRepository:
    """
    Repositorio de proveedores. Todas las consultas filtran por user_id.
    """

    def __init__(self, db: Session):
        self.db = db

    # ===== CRUD BÁSICO =====

    def create(self, user_id: str, data: SupplierCreate) -> Supplier:
        """Crear nuevo proveedor"""
        try:
            supplier = Supplier(
                user_id=user_id,
                name=data.name.strip(),
                contact_person=data.contact_person.strip(),
                email=data.email.strip().lower(),
                phone=data.phone.strip(),
                address=(data.address or "").strip()
            )
            self.db.add(supplier)
            self.db.commit()
            self.db.refresh(supplier)
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Supplier created - id: {supplier.id}, user: {user_id}, name: {supplier.name}")
        return supplier

    def find_many(self, user_id: str, search: Optional[str] = None) -> List[Supplier]:
        """Proveedores del usuario ordenados por nombre"""
        query = self.db.query(Supplier).filter(Supplier.user_id == user_id)

        if search and search.strip():
            pattern = contains_pattern(search.strip())
            query = query.filter(or_(
                Supplier.name.ilike(pattern, escape=LIKE_ESCAPE),
                Supplier.contact_person.ilike(pattern, escape=LIKE_ESCAPE),
                Supplier.email.ilike(pattern, escape=LIKE_ESCAPE)
            ))

        return query.order_by(asc(Supplier.name)).all()

    def find_by_id(self, user_id: str, supplier_id: str) -> Optional[Supplier]:
        """Obtener proveedor por ID (None si no existe, es ajeno o el ID es inválido)"""
        if not is_valid_object_id(supplier_id):
            logger.debug(f"Invalid supplier ID format: {supplier_id!r}")
            return None

        return self.db.query(Supplier).filter(
            Supplier.id == supplier_id.lower(),
            Supplier.user_id == user_id
        ).first()

    def find_by_name(self, user_id: str, name: str) -> Optional[Supplier]:
        """Buscar proveedor por nombre exacto sin distinguir mayúsculas"""
        return self.db.query(Supplier).filter(
            Supplier.user_id == user_id,
            func.lower(Supplier.name) == name.strip().lower()
        ).first()

    def update(self, user_id: str, supplier_id: str, data: Dict[str, Any]) -> Optional[Supplier]:
        """
        Actualizar solo los campos presentes.
        Sin campos, devuelve el estado actual.
        """
        update_data = {key: value for key, value in data.items() if value is not None}

        if not update_data:
            return self.find_by_id(user_id, supplier_id)

        if not is_valid_object_id(supplier_id):
            logger.debug(f"Invalid supplier ID format: {supplier_id!r}")
            return None

        update_data["updated_at"] = datetime.now()

        try:
            rows_updated = self.db.query(Supplier).filter(
                Supplier.id == supplier_id.lower(),
                Supplier.user_id == user_id
            ).update(update_data, synchronize_session=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if rows_updated == 0:
            return None

        logger.info(
            f"Supplier updated - id: {supplier_id}, user: {user_id}, "
            f"fields: {sorted(k for k in update_data if k != 'updated_at')}"
        )
        return self.find_by_id(user_id, supplier_id)

    def delete(self, user_id: str, supplier_id: str) -> bool:
        """True si se eliminó exactamente un registro"""
        if not is_valid_object_id(supplier_id):
            logger.debug(f"Invalid supplier ID format: {supplier_id!r}")
            return False

        try:
            rows_deleted = self.db.query(Supplier).filter(
                Supplier.id == supplier_id.lower(),
                Supplier.user_id == user_id
            ).delete(synchronize_session=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if rows_deleted == 1:
            logger.info(f"Supplier deleted - id: {supplier_id}, user: {user_id}")
            return True
        return False

    # ===== CONSULTAS DERIVADAS =====

    def count(self, user_id: str) -> int:
        return self.db.query(func.count(Supplier.id)).filter(
            Supplier.user_id == user_id
        ).scalar() or 0

    def get_names(self, user_id: str) -> List[str]:
        """Nombres de proveedores para selectores, ordenados"""
        rows = self.db.query(Supplier.name).filter(
            Supplier.user_id == user_id
        ).order_by(asc(Supplier.name)).all()
        return [row.name for row in rows]
