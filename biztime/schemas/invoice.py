"""
BizTime Backend — Invoice Request/Response Schemas
====================================================

What:  Pydantic models defining the /invoices API contract.

Response shapes:
    GET    /invoices       → {"invoices": [{id, comp_code}, ...]}
    GET    /invoices/{id}  → {"invoice": {id, amt, paid, add_date, paid_date, company: {...}}}
    POST   /invoices       → {"invoice": {id, comp_code, amt, paid, add_date, paid_date}}  (201)
    PUT    /invoices/{id}  → {"invoice": {id, comp_code, amt, paid, add_date, paid_date}}

Amount parsing:
    `amt` must parse as a finite decimal strictly greater than zero with at
    most two fractional digits (the NUMERIC(12, 2) column). Numeric strings
    ("100", "12.50") are accepted; booleans, zero, negatives, NaN, infinity,
    sub-cent values and non-numeric strings are rejected with 400.
"""

from datetime import date
from decimal import Decimal
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, Field

from biztime.schemas.common import Money
from biztime.schemas.company import CompanyDetail


def reject_boolean_amount(value: Any) -> Any:
    """Pydantic would coerce true/false to 1/0; an amount is never a flag."""
    if isinstance(value, bool):
        raise ValueError("Amount must be a number, not a boolean")
    return value


# Finite decimal strictly greater than zero that fits NUMERIC(12, 2)
Amount = Annotated[
    Decimal,
    BeforeValidator(reject_boolean_amount),
    Field(gt=0, max_digits=12, decimal_places=2, allow_inf_nan=False),
]


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class InvoiceSummary(BaseModel):
    """Compact invoice entry for the list endpoint."""
    id: int = Field(description="Invoice id")
    comp_code: str = Field(description="Owning company code")


class InvoiceRecord(BaseModel):
    """
    What:  The full invoice row.
    Who:   Returned by POST /invoices and PUT /invoices/{id}.
    """
    id: int = Field(description="Server-generated invoice id")
    comp_code: str = Field(description="Owning company code")
    amt: Money = Field(description="Invoice amount")
    paid: bool = Field(description="Whether the invoice has been paid")
    add_date: date = Field(description="Date the invoice was created")
    paid_date: Optional[date] = Field(default=None, description="Date paid, null while unpaid")


class InvoiceWithCompany(BaseModel):
    """
    What:  Invoice detail with its owning company nested under `company`.
    Who:   Returned by GET /invoices/{id}.

    `company` is null only if the owning row vanished between the two reads,
    which the foreign key and the per-request transaction make unreachable in
    practice.
    """
    id: int
    amt: Money
    paid: bool
    add_date: date
    paid_date: Optional[date] = None
    company: Optional[CompanyDetail] = Field(description="Company referenced by comp_code")


class InvoiceListResponse(BaseModel):
    invoices: List[InvoiceSummary]


class InvoiceResponse(BaseModel):
    invoice: InvoiceRecord


class InvoiceDetailResponse(BaseModel):
    invoice: InvoiceWithCompany


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class InvoiceCreate(BaseModel):
    """
    Body of POST /invoices.

    comp_code is not checked against the companies table here; an unknown
    code fails on the foreign key at insert time.
    """
    comp_code: str = Field(min_length=1, description="Code of the owning company")
    amt: Amount = Field(description="Invoice amount (> 0)")


class InvoiceUpdate(BaseModel):
    """Body of PUT /invoices/{id}. Only the amount can change."""
    amt: Amount = Field(description="New invoice amount (> 0)")
