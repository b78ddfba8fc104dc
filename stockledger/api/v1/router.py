# stockledger/api/v1/router.py
from fastapi import APIRouter

from stockledger.config.settings import settings
from stockledger.modules.products import products_router
from stockledger.modules.suppliers import suppliers_router
from stockledger.modules.transactions import transactions_router

# Crear router principal de la API v1
api_router = APIRouter()

# ==================== MÓDULOS ====================

api_router.include_router(
    products_router,
    prefix="/products",
    tags=["Products"]
)

api_router.include_router(
    suppliers_router,
    prefix="/suppliers",
    tags=["Suppliers"]
)

api_router.include_router(
    transactions_router,
    prefix="/transactions",
    tags=["Transactions"]
)

# ==================== ENDPOINTS RAÍZ ====================

@api_router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": settings.version,
        "app": settings.app_name
    }
