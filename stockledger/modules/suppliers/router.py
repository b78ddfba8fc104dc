from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from stockledger.config.database import get_db
from stockledger.core.dependencies import get_current_user_id
from .schemas import SupplierResponse
from .service import SupplierService

router = APIRouter()


@router.post("", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
def create_supplier(
    payload: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Crear proveedor"""
    return SupplierService(db).create_supplier(user_id, payload)


@router.get("", response_model=List[SupplierResponse])
def list_suppliers(
    search: Optional[str] = Query(None, description="Nombre, contacto o email"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Listar proveedores del usuario

    **Filtros disponibles:**
    - search: coincidencia parcial sin distinguir mayúsculas
    """
    return SupplierService(db).list_suppliers(user_id, {"search": search})


@router.get("/names", response_model=List[str])
def list_supplier_names(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return SupplierService(db).list_supplier_names(user_id)


@router.get("/{supplier_id}", response_model=SupplierResponse)
def get_supplier(
    supplier_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return SupplierService(db).get_supplier(user_id, supplier_id)


@router.patch("/{supplier_id}", response_model=SupplierResponse)
def update_supplier(
    supplier_id: str,
    payload: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Actualización parcial del proveedor"""
    return SupplierService(db).update_supplier(user_id, supplier_id, payload)


@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_supplier(
    supplier_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Eliminar proveedor sin productos asociados"""
    SupplierService(db).delete_supplier(user_id, supplier_id)
