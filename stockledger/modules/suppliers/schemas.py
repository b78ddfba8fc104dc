from typing import Any, Optional

from pydantic import field_validator

from stockledger.core.validation import CommonValidators, InputSchema
from stockledger.shared.database.models import Supplier
from stockledger.shared.schemas import LedgerBaseModel, to_iso

# ==================== REQUEST SCHEMAS ====================

class SupplierCreate(InputSchema):
    name: str
    contact_person: str
    email: str
    phone: str
    address: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any):
        return CommonValidators.validate_name(v)

    @field_validator("contact_person", mode="before")
    @classmethod
    def validate_contact_person(cls, v: Any):
        return CommonValidators.validate_name(v, "Contact person")

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any):
        return CommonValidators.validate_email(v)

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, v: Any):
        return CommonValidators.validate_phone(v)

    @field_validator("address", mode="before")
    @classmethod
    def validate_address(cls, v: Any):
        return CommonValidators.validate_address(v)


class SupplierUpdate(InputSchema):
    """Solo se validan y aplican los campos presentes"""
    name: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any):
        return CommonValidators.validate_name(v)

    @field_validator("contact_person", mode="before")
    @classmethod
    def validate_contact_person(cls, v: Any):
        return CommonValidators.validate_name(v, "Contact person")

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any):
        return CommonValidators.validate_email(v)

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, v: Any):
        return CommonValidators.validate_phone(v)

    @field_validator("address", mode="before")
    @classmethod
    def validate_address(cls, v: Any):
        return CommonValidators.validate_address(v)


class SupplierFilter(InputSchema):
    search: Optional[str] = None

    @field_validator("search", mode="before")
    @classmethod
    def validate_search(cls, v: Any):
        return CommonValidators.validate_search(v)

# ==================== RESPONSE SCHEMAS ====================

class SupplierResponse(LedgerBaseModel):
    id: str
    user_id: str
    name: str
    contact_person: str
    email: str
    phone: str
    address: str
    created_at: str
    updated_at: str


def to_supplier_response(supplier: Supplier) -> SupplierResponse:
    return SupplierResponse(
        id=str(supplier.id),
        user_id=supplier.user_id,
        name=supplier.name,
        contact_person=supplier.contact_person,
        email=supplier.email,
        phone=supplier.phone,
        address=supplier.address or "",
        created_at=to_iso(supplier.created_at),
        updated_at=to_iso(supplier.updated_at)
    )
