"""
Errores de dominio

Jerarquía cerrada de errores que lanza la capa de servicios. La capa HTTP
los traduce a respuestas usando `status_code`; cualquier otra excepción se
considera inesperada (se registra y se enmascara).
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError


class ErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    OPERATION_FAILED = "OPERATION_FAILED"
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"


# ==================== CLASE BASE ====================

class DomainError(Exception):
    """Base de todos los errores de dominio"""

    code: ErrorCode
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code.value, "message": self.message}


# ==================== ERRORES ESPECÍFICOS ====================

class NotFoundError(DomainError):
    """El recurso no existe o pertenece a otro usuario"""

    code = ErrorCode.NOT_FOUND
    status_code = 404

    def __init__(self, resource: str, identifier: Optional[str] = None):
        self.resource = resource
        self.identifier = identifier
        if identifier:
            message = f"{resource} with ID '{identifier}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"resource": self.resource, "identifier": self.identifier})
        return data


class ValidationError(DomainError):
    """
    Entrada inválida.

    `field` y `message` describen la primera violación; `details` contiene
    todas las violaciones encontradas ({field, message, code}).
    """

    code = ErrorCode.VALIDATION_ERROR
    status_code = 400

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[List[Dict[str, str]]] = None
    ):
        super().__init__(message)
        self.field = field
        self.details = details or []

    @classmethod
    def from_pydantic(cls, error: PydanticValidationError) -> "ValidationError":
        details = format_pydantic_errors(error)
        if not details:
            return cls("Validation failed")
        first = details[0]
        field = first["field"] if first["field"] != "root" else None
        return cls(first["message"], field, details)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"field": self.field, "details": self.details})
        return data


class BusinessRuleError(DomainError):
    code = ErrorCode.BUSINESS_RULE_VIOLATION
    status_code = 400


class InsufficientStockError(DomainError):
    code = ErrorCode.INSUFFICIENT_STOCK
    status_code = 400

    def __init__(self, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(f"Insufficient stock. Available: {available}, Requested: {requested}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"available": self.available, "requested": self.requested})
        return data


class OperationFailedError(DomainError):
    """Una mutación que debía coincidir no afectó ningún registro"""

    code = ErrorCode.OPERATION_FAILED
    status_code = 500

    def __init__(self, operation: str, reason: Optional[str] = None):
        self.operation = operation
        self.reason = reason
        message = f"{operation} failed: {reason}" if reason else f"{operation} failed"
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"operation": self.operation, "reason": self.reason})
        return data


# ==================== UTILIDADES ====================

def format_pydantic_errors(error: PydanticValidationError) -> List[Dict[str, str]]:
    """Aplanar los errores de pydantic a {field, message, code}"""
    details = []
    for issue in error.errors():
        field = ".".join(str(part) for part in issue.get("loc", ())) or "root"
        if issue["type"] == "missing":
            message = f"{field} is required"
        else:
            message = issue["msg"]
        details.append({"field": field, "message": message, "code": issue["type"]})
    return details


def is_domain_error(error: BaseException) -> bool:
    return isinstance(error, DomainError)
