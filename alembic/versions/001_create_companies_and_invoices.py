"""Create companies and invoices tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates `companies` and `invoices` with the invoice → company
       foreign key (ON DELETE RESTRICT) and the positive-amount check.

Rollback: downgrade() drops both tables (destructive, all data is lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create both tables, constraints, and the comp_code index.

    Column documentation lives in biztime/models/company.py and invoice.py.
    """
    op.create_table(
        "companies",
        sa.Column(
            "code",
            sa.Text(),
            nullable=False,
            comment="Unique company code chosen at creation; immutable",
        ),
        sa.Column(
            "name",
            sa.Text(),
            nullable=False,
            comment="Display name of the company",
        ),
        sa.Column(
            "description",
            sa.Text(),
            nullable=False,
            comment="Free-text description of the company",
        ),
        sa.PrimaryKeyConstraint("code"),
    )

    op.create_table(
        "invoices",
        sa.Column(
            "id",
            sa.Integer(),
            autoincrement=True,
            nullable=False,
            comment="Server-generated invoice id",
        ),
        sa.Column(
            "comp_code",
            sa.Text(),
            nullable=False,
            comment="Owning company; immutable after creation",
        ),
        sa.Column(
            "amt",
            sa.Numeric(12, 2),
            nullable=False,
            comment="Invoice amount; strictly positive",
        ),
        sa.Column(
            "paid",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
            comment="Whether the invoice has been paid",
        ),
        sa.Column(
            "add_date",
            sa.Date(),
            nullable=False,
            server_default=sa.text("CURRENT_DATE"),
            comment="Date the invoice was created",
        ),
        sa.Column(
            "paid_date",
            sa.Date(),
            nullable=True,
            comment="Date the invoice was paid (null while unpaid)",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["comp_code"],
            ["companies.code"],
            ondelete="RESTRICT",
        ),
        sa.CheckConstraint("amt > 0", name="ck_invoices_amt_positive"),
    )

    op.create_index("idx_invoices_comp_code", "invoices", ["comp_code"])


def downgrade() -> None:
    """
    Drop both tables, invoices first (it references companies).

    WARNING: This is destructive. All company and invoice data is lost.
    """
    op.drop_index("idx_invoices_comp_code", table_name="invoices")
    op.drop_table("invoices")
    op.drop_table("companies")
