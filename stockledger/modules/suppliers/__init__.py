# stockledger/modules/suppliers/__init__.py
"""
Módulo de Proveedores

- Alta, consulta, edición y baja de proveedores por usuario
- Búsqueda por nombre, persona de contacto o email
- Baja restringida mientras haya productos que lo referencian

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as suppliers_router
from .service import SupplierService
from .repository import SupplierRepository

__all__ = [
    "suppliers_router",
    "SupplierService",
    "SupplierRepository"
]
