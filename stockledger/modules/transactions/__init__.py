# stockledger/modules/transactions/__init__.py
"""
Módulo de Transacciones

- Historial de ventas por usuario (inmutable)
- Estadísticas y ventas diarias por periodo (today, week, month)
- Eliminación para corregir registros erróneos

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio
- repository.py: Acceso a datos
- periods.py: Cálculo de rangos de fechas
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as transactions_router
from .service import TransactionService
from .repository import TransactionRepository

__all__ = [
    "transactions_router",
    "TransactionService",
    "TransactionRepository"
]
