from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from stockledger.config.database import get_db
from stockledger.core.dependencies import get_current_user_id
from .schemas import LowStockResult, ProductResponse, ProductStats, SellProductResult
from .service import ProductService

router = APIRouter()

# ===== CONSULTAS =====

@router.get("", response_model=List[ProductResponse])
def list_products(
    search: Optional[str] = Query(None, description="Nombre del producto o del proveedor"),
    stock_status: Optional[str] = Query(None, description="all, in-stock, low-stock, out-of-stock"),
    supplier_id: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Listar productos del usuario

    **Filtros disponibles:**
    - search: coincidencia parcial en producto o proveedor
    - stock_status: estado de stock según el umbral configurado
    - supplier_id: productos de un proveedor
    """
    return ProductService(db).list_products(user_id, {
        "search": search,
        "stock_status": stock_status,
        "supplier_id": supplier_id
    })


@router.get("/stats", response_model=ProductStats)
def get_product_stats(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return ProductService(db).get_product_stats(user_id)


@router.get("/low-stock", response_model=LowStockResult)
def get_low_stock_products(
    limit: Optional[str] = Query(None, description="1 a 100, por defecto 5"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return ProductService(db).get_low_stock_products(user_id, {"limit": limit})


@router.get("/suppliers", response_model=List[str])
def list_supplier_references(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """IDs de proveedor referenciados por los productos"""
    return ProductService(db).list_supplier_references(user_id)


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return ProductService(db).get_product(user_id, product_id)

# ===== OPERACIONES =====

@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Crear producto de un proveedor existente"""
    return ProductService(db).create_product(user_id, payload)


@router.patch("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str,
    payload: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return ProductService(db).update_product(user_id, product_id, payload)


@router.post("/{product_id}/sell", response_model=SellProductResult)
def sell_product(
    product_id: str,
    payload: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Vender producto

    **Proceso:**
    - Verifica stock disponible
    - Descuenta stock de forma atómica
    - Registra la transacción con el precio vigente
    """
    return ProductService(db).sell_product(user_id, product_id, payload)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    ProductService(db).delete_product(user_id, product_id)
