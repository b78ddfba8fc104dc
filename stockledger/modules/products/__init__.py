# stockledger/modules/products/__init__.py
"""
Módulo de Productos

- Catálogo de productos por usuario con proveedor asociado
- Filtros por búsqueda, estado de stock y proveedor
- Venta con descuento atómico de stock y registro de transacción
- Estadísticas de inventario y alertas de stock bajo

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as products_router
from .service import ProductService
from .repository import ProductRepository

__all__ = [
    "products_router",
    "ProductService",
    "ProductRepository"
]
