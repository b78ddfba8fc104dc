from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

# ==================== CLASE BASE PARA RESPUESTAS (Pydantic v2) ====================

class LedgerBaseModel(BaseModel):
    """
    Clase base para todos los esquemas de respuesta,
    con configuración de Pydantic v2.
    """
    model_config = ConfigDict(from_attributes=True)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def to_money(value: Optional[Decimal]) -> float:
    return float(value) if value is not None else 0.0
