import re
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from .exceptions import ValidationError

# ==================== PATRONES Y LÍMITES ====================

OBJECT_ID_PATTERN = re.compile(r"^[a-fA-F0-9]{24}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
MIN_PRICE = Decimal("0.01")
MAX_PRICE = Decimal("99999999.99")
MAX_LIMIT = 100
MAX_WHOLE_NUMBER = 2**31 - 1
CENTS = Decimal("0.01")

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def is_valid_object_id(value: Any) -> bool:
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.match(value))


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


# ==================== VALIDADORES COMUNES ====================

class CommonValidators:
    """
    Reglas de campo compartidas por los esquemas de entrada.

    Cada validador recibe el valor crudo y devuelve el valor normalizado o
    lanza PydanticCustomError con un mensaje listo para el cliente.
    """

    @staticmethod
    def validate_name(v: Any, label: str = "Name") -> str:
        if not isinstance(v, str):
            raise PydanticCustomError("invalid_type", f"{label} must be a string")
        v = v.strip()
        if len(v) < NAME_MIN_LENGTH:
            raise PydanticCustomError(
                "too_short", f"{label} must be at least {NAME_MIN_LENGTH} characters"
            )
        if len(v) > NAME_MAX_LENGTH:
            raise PydanticCustomError(
                "too_long", f"{label} must not exceed {NAME_MAX_LENGTH} characters"
            )
        return v

    @staticmethod
    def validate_price(v: Any) -> Decimal:
        if not _is_number(v):
            raise PydanticCustomError("invalid_type", "Price must be a number")
        price = v if isinstance(v, Decimal) else Decimal(str(v))
        if not price.is_finite():
            raise PydanticCustomError("invalid_type", "Price must be a number")
        if price < MIN_PRICE:
            raise PydanticCustomError("too_small", "Price must be at least $0.01")
        if price > MAX_PRICE:
            raise PydanticCustomError("too_big", "Price must not exceed $99999999.99")
        return to_cents(price)

    @staticmethod
    def validate_whole_number(v: Any, label: str, minimum: int) -> int:
        if not _is_number(v):
            raise PydanticCustomError("invalid_type", f"{label} must be a number")
        if isinstance(v, float) and not v.is_integer():
            raise PydanticCustomError("not_integer", f"{label} must be a whole number")
        if isinstance(v, Decimal) and (not v.is_finite() or v != v.to_integral_value()):
            raise PydanticCustomError("not_integer", f"{label} must be a whole number")
        v = int(v)
        if v < minimum:
            if minimum == 0:
                message = f"{label} must be 0 or greater"
            else:
                message = f"{label} must be at least {minimum}"
            raise PydanticCustomError("too_small", message)
        # Columnas INTEGER de 32 bits
        if v > MAX_WHOLE_NUMBER:
            raise PydanticCustomError(
                "too_big", f"{label} must not exceed {MAX_WHOLE_NUMBER}"
            )
        return v

    @staticmethod
    def validate_stock_quantity(v: Any) -> int:
        return CommonValidators.validate_whole_number(v, "Stock quantity", 0)

    @staticmethod
    def validate_sell_quantity(v: Any) -> int:
        return CommonValidators.validate_whole_number(v, "Quantity", 1)

    @staticmethod
    def validate_object_id(v: Any, label: str = "ID") -> str:
        if not isinstance(v, str):
            raise PydanticCustomError("invalid_type", f"{label} must be a string")
        v = v.strip()
        if not OBJECT_ID_PATTERN.match(v):
            raise PydanticCustomError("invalid_format", f"Invalid {label} format")
        return v.lower()

    @staticmethod
    def validate_email(v: Any) -> str:
        if not isinstance(v, str):
            raise PydanticCustomError("invalid_type", "Email must be a string")
        v = v.strip().lower()
        if not v:
            raise PydanticCustomError("too_short", "Email is required")
        if not EMAIL_PATTERN.match(v):
            raise PydanticCustomError("invalid_format", "Invalid email format")
        return v

    @staticmethod
    def validate_phone(v: Any) -> str:
        if not isinstance(v, str):
            raise PydanticCustomError("invalid_type", "Phone must be a string")
        v = v.strip()
        if not v:
            raise PydanticCustomError("too_short", "Phone number is required")
        return v

    @staticmethod
    def validate_address(v: Any) -> str:
        if v is None:
            return ""
        if not isinstance(v, str):
            raise PydanticCustomError("invalid_type", "Address must be a string")
        return v.strip()

    @staticmethod
    def validate_search(v: Any) -> Optional[str]:
        if v is None:
            return None
        if not isinstance(v, str):
            raise PydanticCustomError("invalid_type", "Search must be a string")
        return v.strip() or None

    @staticmethod
    def validate_choice(v: Any, choices: Type[Enum], message: str) -> Optional[Enum]:
        if v is None or v == "":
            return None
        try:
            return choices(v)
        except ValueError:
            raise PydanticCustomError("invalid_choice", message)

    @staticmethod
    def validate_limit(v: Any, default: int) -> int:
        if v is None or v == "":
            return default
        if isinstance(v, str):
            try:
                v = int(v.strip())
            except ValueError:
                raise PydanticCustomError("invalid_type", "Limit must be a number")
        v = CommonValidators.validate_whole_number(v, "Limit", 1)
        if v > MAX_LIMIT:
            raise PydanticCustomError("too_big", f"Limit must not exceed {MAX_LIMIT}")
        return v


class InputSchema(BaseModel):
    """Base de los esquemas de entrada: ignora campos desconocidos"""
    model_config = ConfigDict(extra="ignore")


def validate_input(schema: Type[SchemaT], raw: Any) -> SchemaT:
    """
    Validar entrada cruda contra un esquema.

    Devuelve la instancia validada o lanza ValidationError con la primera
    violación y la lista completa en `details`.
    """
    if isinstance(raw, schema):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(exclude_unset=True)
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ValidationError("Input must be an object")

    try:
        return schema.model_validate(dict(raw))
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e
