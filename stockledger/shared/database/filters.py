from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Query

LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    """Patrón LIKE de subcadena literal (escapa comodines)"""
    escaped = (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def apply_date_range(
    query: Query,
    column,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None
) -> Query:
    """Filtrar por rango cerrado; un límite ausente queda abierto"""
    if start_date is not None:
        query = query.filter(column >= start_date)
    if end_date is not None:
        query = query.filter(column <= end_date)
    return query
