"""
BizTime Backend — Company SQLAlchemy Model
============================================

What:  ORM model representing the `companies` table.
How:   Inherits from the shared DeclarativeBase; Alembic and the test suite
       read Base.metadata for the schema.
Who:   Used by CompanyService (Core statements built from the mapped columns)
       and by InvoiceService to resolve an invoice's owning company.

Table Design:
    - code: caller-chosen TEXT primary key, the only stable identifier of a
      company. Never updated after creation.
    - name / description: free text, both required.
    - Invoices reference companies.code (see models/invoice.py).
"""

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from biztime.database import Base


class Company(Base):
    """
    A company that can be billed through invoices.

    Query Patterns:
        - List companies: SELECT code, name FROM companies
        - Get/update/delete one: ... WHERE code = :code
          → primary key lookup
    """

    __tablename__ = "companies"

    # ── Primary Key ───────────────────────────────────────────────────────
    # Short slug such as "apple" or "ibm"; immutable after creation
    code: Mapped[str] = mapped_column(
        Text,
        primary_key=True,
        comment="Unique company code chosen at creation; immutable",
    )

    name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Display name of the company",
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Free-text description of the company",
    )

    def __repr__(self) -> str:
        return f"<Company(code='{self.code}', name='{self.name}')>"
