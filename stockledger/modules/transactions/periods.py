"""
Rangos de fechas para reportes

Los periodos se calculan sobre la hora local del servidor:
- today: 00:00:00.000 a 23:59:59.999 del día actual
- week: domingo 00:00:00.000 a sábado 23:59:59.999
- month: día 1 00:00:00.000 al último día 23:59:59.999
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Optional


class TransactionPeriod(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


END_OF_DAY = time(23, 59, 59, 999000)

_DATE_ONLY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass
class DateRange:
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


# ==================== LÍMITES DE CALENDARIO ====================

def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), END_OF_DAY)


def week_start(moment: datetime) -> datetime:
    """Domingo de la semana de `moment` a las 00:00"""
    days_since_sunday = (moment.weekday() + 1) % 7
    return start_of_day(moment - timedelta(days=days_since_sunday))


def week_end(moment: datetime) -> datetime:
    """Sábado de la semana de `moment` a las 23:59:59.999"""
    return end_of_day(week_start(moment) + timedelta(days=6))


def month_start(moment: datetime) -> datetime:
    return datetime.combine(moment.date().replace(day=1), time.min)


def month_end(moment: datetime) -> datetime:
    last_day = calendar.monthrange(moment.year, moment.month)[1]
    return datetime.combine(moment.date().replace(day=last_day), END_OF_DAY)


def period_range(period: TransactionPeriod, now: datetime) -> DateRange:
    if period == TransactionPeriod.TODAY:
        return DateRange(start_of_day(now), end_of_day(now))
    if period == TransactionPeriod.WEEK:
        return DateRange(week_start(now), week_end(now))
    return DateRange(month_start(now), month_end(now))

# ==================== FECHAS EXPLÍCITAS ====================

def parse_date(value: Any, end_of_day_if_date_only: bool = False) -> Optional[datetime]:
    """
    Convertir una fecha ISO (fecha o fecha-hora) a datetime local naive.

    Devuelve None si el valor falta o no es válido. Las fechas con zona
    horaria se pasan a la hora local del servidor. Una fecha sin hora usada
    como límite superior cubre el día completo.
    """
    if value is None:
        return None

    date_only = False
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
        date_only = True
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        date_only = bool(_DATE_ONLY_PATTERN.match(text))
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        # Fechas en el borde del calendario no admiten la conversión
        try:
            parsed = parsed.astimezone().replace(tzinfo=None)
        except (OverflowError, ValueError):
            return None

    if date_only and end_of_day_if_date_only:
        parsed = datetime.combine(parsed.date(), END_OF_DAY)

    return parsed


def resolve_date_range(
    period: Optional[TransactionPeriod] = None,
    start_date: Any = None,
    end_date: Any = None,
    now: Optional[datetime] = None
) -> DateRange:
    """
    Rango para listados y estadísticas.

    Un periodo tiene prioridad sobre las fechas explícitas; una fecha
    ausente o inválida deja ese extremo abierto.
    """
    now = now or datetime.now()

    if period is not None:
        return period_range(TransactionPeriod(period), now)

    return DateRange(
        parse_date(start_date),
        parse_date(end_date, end_of_day_if_date_only=True)
    )


def resolve_required_date_range(
    period: Optional[TransactionPeriod] = None,
    start_date: Any = None,
    end_date: Any = None,
    now: Optional[datetime] = None
) -> DateRange:
    """Rango cerrado: los extremos que falten toman la semana actual"""
    now = now or datetime.now()
    date_range = resolve_date_range(period, start_date, end_date, now)

    return DateRange(
        date_range.start_date or week_start(now),
        date_range.end_date or week_end(now)
    )
