"""
BizTime Backend — Company Request/Response Schemas
====================================================

What:  Pydantic models defining the /companies API contract.
How:   FastAPI validates request bodies against the *Create/*Update models
       (failures become 400 responses, see main.py) and serializes service
       results through the *Response models.

Response shapes:
    GET    /companies         → {"companies": [{code, name}, ...]}
    GET    /companies/{code}  → {"company": {code, name, description, invoices: [...]}}
    POST   /companies         → {"company": {code, name, description}}   (201)
    PUT    /companies/{code}  → {"company": {code, name, description}}
"""

from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, Field, model_validator

from biztime.schemas.common import Money


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class CompanySummary(BaseModel):
    """Compact company entry for the list endpoint (description omitted)."""
    code: str = Field(description="Unique company code")
    name: str = Field(description="Company name")


class CompanyDetail(BaseModel):
    """
    What:  Full company record.
    Who:   Returned by create/update, and nested under an invoice's `company`.
    """
    code: str = Field(description="Unique company code")
    name: str = Field(description="Company name")
    description: str = Field(description="Company description")


class CompanyInvoice(BaseModel):
    """One invoice as listed under GET /companies/{code}."""
    id: int = Field(description="Invoice id")
    comp_code: str = Field(description="Owning company code (always the requested code)")
    amt: Money = Field(description="Invoice amount")
    paid: bool = Field(description="Whether the invoice has been paid")
    add_date: date = Field(description="Date the invoice was created")
    paid_date: Optional[date] = Field(default=None, description="Date paid, null while unpaid")


class CompanyWithInvoices(CompanyDetail):
    """
    What:  Company record plus every invoice it owns.
    Who:   Returned by GET /companies/{code}.
    """
    invoices: List[CompanyInvoice] = Field(
        default_factory=list,
        description="Invoices whose comp_code equals this company's code",
    )


class CompanyListResponse(BaseModel):
    companies: List[CompanySummary]


class CompanyResponse(BaseModel):
    company: CompanyDetail


class CompanyDetailResponse(BaseModel):
    company: CompanyWithInvoices


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CompanyCreate(BaseModel):
    """
    Body of POST /companies. All three fields are required.

    No uniqueness check happens here; a duplicate code is rejected by the
    primary key constraint when the row is inserted.
    """
    code: str = Field(min_length=1, description="Unique company code")
    name: str = Field(description="Company name")
    description: str = Field(description="Company description")


class CompanyUpdate(BaseModel):
    """
    Body of PUT /companies/{code}.

    `name` and `description` are required. A body that carries a `code` key
    is rejected whatever its value: the code comes from the path and is
    immutable.
    """
    name: str = Field(description="New company name")
    description: str = Field(description="New company description")

    @model_validator(mode="before")
    @classmethod
    def reject_code_change(cls, data: Any) -> Any:
        if isinstance(data, dict) and "code" in data:
            raise ValueError("Company code cannot be changed")
        return data
