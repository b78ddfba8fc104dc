from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from stockledger.config.database import get_db
from stockledger.core.dependencies import get_current_user_id
from .schemas import DailySalesResult, TransactionResponse, TransactionStats
from .service import TransactionService

router = APIRouter()


@router.get("", response_model=List[TransactionResponse])
def list_transactions(
    search: Optional[str] = Query(None, description="Nombre del producto"),
    period: Optional[str] = Query(None, description="today, week o month"),
    start_date: Optional[str] = Query(None, description="Fecha ISO inicial"),
    end_date: Optional[str] = Query(None, description="Fecha ISO final"),
    product_id: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Listar ventas registradas

    **Filtros disponibles:**
    - period tiene prioridad sobre start_date / end_date
    - una fecha inválida deja ese extremo abierto
    """
    return TransactionService(db).list_transactions(user_id, {
        "search": search,
        "period": period,
        "start_date": start_date,
        "end_date": end_date,
        "product_id": product_id
    })


@router.get("/stats", response_model=TransactionStats)
def get_transaction_stats(
    period: Optional[str] = Query(None),
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return TransactionService(db).get_transaction_stats(user_id, {
        "period": period,
        "start_date": start_date,
        "end_date": end_date
    })


@router.get("/daily-sales", response_model=DailySalesResult)
def get_daily_sales(
    period: Optional[str] = Query(None),
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Ventas agrupadas por día (por defecto, la semana actual)"""
    return TransactionService(db).get_daily_sales(user_id, {
        "period": period,
        "start_date": start_date,
        "end_date": end_date
    })


@router.get("/recent", response_model=List[TransactionResponse])
def get_recent_transactions(
    limit: Optional[str] = Query(None, description="1 a 100, por defecto 10"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return TransactionService(db).get_recent_transactions(user_id, {"limit": limit})


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return TransactionService(db).get_transaction(user_id, transaction_id)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(
    transaction_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Eliminar una venta registrada por error (no repone stock)"""
    TransactionService(db).delete_transaction(user_id, transaction_id)
