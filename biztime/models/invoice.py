"""
BizTime Backend — Invoice SQLAlchemy Model
============================================

What:  ORM model representing the `invoices` table.
Who:   Used by InvoiceService for CRUD statements and by CompanyService to
       list a company's invoices.

Table Design:
    - id: auto-increment INTEGER primary key
    - comp_code: FOREIGN KEY → companies.code, ON DELETE RESTRICT. A company
      that still owns invoices cannot be deleted; the store rejects it.
    - amt: NUMERIC(12, 2), strictly positive (CHECK amt > 0 mirrors request
      validation); exact decimal, no binary rounding
    - paid / add_date / paid_date: server-managed, never taken from a request
    - Index on comp_code: backs "all invoices of a company" lookups
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    Text,
    false,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from biztime.database import Base

# Largest value the INTEGER id column can hold
MAX_INVOICE_ID = 2**31 - 1


class Invoice(Base):
    """
    A billing record owned by exactly one company.

    Lifecycle:
        1. Created with comp_code and amt (paid = false, add_date = today)
        2. amt may be changed in place; comp_code never changes
        3. Deleted permanently (no soft delete)
    """

    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Server-generated invoice id",
    )

    comp_code: Mapped[str] = mapped_column(
        Text,
        ForeignKey("companies.code", ondelete="RESTRICT"),
        nullable=False,
        comment="Owning company; immutable after creation",
    )

    amt: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        comment="Invoice amount; strictly positive",
    )

    paid: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        comment="Whether the invoice has been paid",
    )

    add_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        default=date.today,
        server_default=text("CURRENT_DATE"),
        comment="Date the invoice was created",
    )

    paid_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        default=None,
        comment="Date the invoice was paid (null while unpaid)",
    )

    __table_args__ = (
        CheckConstraint("amt > 0", name="ck_invoices_amt_positive"),
        Index("idx_invoices_comp_code", "comp_code"),
    )

    def __repr__(self) -> str:
        return (
            f"<Invoice(id={self.id}, comp_code='{self.comp_code}', "
            f"amt={self.amt}, paid={self.paid})>"
        )
