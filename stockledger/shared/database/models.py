import secrets
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from stockledger.config.database import Base


def new_object_id() -> str:
    """Identificador opaco de 24 caracteres hexadecimales"""
    return secrets.token_hex(12)


class TimestampMixin:
    """Mixin para timestamps automáticos (hora local del servidor)"""
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

# ===== PROVEEDORES =====

class Supplier(Base, TimestampMixin):
    """Modelo de Proveedor"""
    __tablename__ = "suppliers"

    id = Column(String(24), primary_key=True, default=new_object_id)
    user_id = Column(String(255), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    contact_person = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    address = Column(Text, nullable=False, default="")

    __table_args__ = (
        Index("ix_suppliers_user_name", "user_id", "name"),
        Index("ix_suppliers_user_email", "user_id", "email"),
    )

# ===== PRODUCTOS =====

class Product(Base, TimestampMixin):
    """
    Modelo de Producto

    supplier_id no es una FK de BD: la integridad referencial
    (proveedor del mismo usuario) se valida al escribir en el servicio.
    """
    __tablename__ = "products"

    id = Column(String(24), primary_key=True, default=new_object_id)
    user_id = Column(String(255), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    supplier_id = Column(String(24), nullable=False, index=True)

    __table_args__ = (
        Index("ix_products_user_name", "user_id", "name"),
        Index("ix_products_user_supplier", "user_id", "supplier_id"),
        Index("ix_products_user_stock", "user_id", "stock_quantity"),
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("price > 0", name="ck_products_price_positive"),
    )

    # Relationships (join al leer, solo lectura)
    supplier = relationship(
        "Supplier",
        primaryjoin="and_(Supplier.id == foreign(Product.supplier_id), "
                    "Supplier.user_id == foreign(Product.user_id))",
        viewonly=True,
        lazy="joined",
        uselist=False
    )

    @property
    def supplier_name(self) -> str:
        return self.supplier.name if self.supplier else ""

# ===== TRANSACCIONES =====

class Transaction(Base):
    """
    Modelo de Transacción de venta - inmutable

    product_id / product_name son una copia al momento de la venta,
    sobreviven a renombres o borrado del producto.
    """
    __tablename__ = "transactions"

    id = Column(String(24), primary_key=True, default=new_object_id)
    user_id = Column(String(255), nullable=False, index=True)
    product_id = Column(String(24), nullable=False)
    product_name = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    __table_args__ = (
        Index("ix_transactions_user_created", "user_id", "created_at"),
        Index("ix_transactions_user_product", "user_id", "product_id"),
        Index("ix_transactions_user_product_name", "user_id", "product_name"),
        CheckConstraint("quantity >= 1", name="ck_transactions_quantity_positive"),
        CheckConstraint("unit_price >= 0", name="ck_transactions_unit_price_non_negative"),
        CheckConstraint("total_amount >= 0", name="ck_transactions_total_non_negative"),
    )
