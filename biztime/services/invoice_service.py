"""
BizTime Backend — Invoice Service
===================================

What:  Business logic for the /invoices resource: list, fetch with owning
       company, create, update amount, delete.
How:   Parameterized Core statements through run_query(); a keyed lookup or
       mutation that matches no row becomes NotFoundError.
Who:   Called by the invoice route handlers.

Owning company resolution (get_invoice):
    1. Read the invoice row by id
    2. Read the company row by the invoice's comp_code
    Both statements run on the request's session, inside one transaction.

Out-of-range ids:
    Ids below 1 or above the INTEGER maximum can never be assigned. They get
    the same NotFoundError as any other unknown id, without a query.

Known gap:
    create_invoice() does not check that comp_code names an existing company.
    The foreign key rejects unknown codes and the failure surfaces as
    ConstraintViolationError (→ 500), not as a 400/404.
"""

import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from biztime.database import run_query, run_query_one
from biztime.exceptions import NotFoundError
from biztime.models import Company, Invoice
from biztime.models.invoice import MAX_INVOICE_ID
from biztime.schemas.common import StatusResponse
from biztime.schemas.company import CompanyDetail
from biztime.schemas.invoice import (
    InvoiceCreate,
    InvoiceDetailResponse,
    InvoiceListResponse,
    InvoiceRecord,
    InvoiceResponse,
    InvoiceSummary,
    InvoiceUpdate,
    InvoiceWithCompany,
)

logger = logging.getLogger(__name__)

INVOICE_COLUMNS = (
    Invoice.id,
    Invoice.comp_code,
    Invoice.amt,
    Invoice.paid,
    Invoice.add_date,
    Invoice.paid_date,
)


def is_storable_invoice_id(invoice_id: int) -> bool:
    return 1 <= invoice_id <= MAX_INVOICE_ID


class InvoiceService:
    """
    Business logic layer for invoice operations.

    Server-managed fields (paid, add_date, paid_date) are never taken from
    a request; only comp_code and amt at creation and amt on update.
    """

    async def list_invoices(self, db: AsyncSession) -> InvoiceListResponse:
        rows = await run_query(
            db, select(Invoice.id, Invoice.comp_code), "list_invoices"
        )
        return InvoiceListResponse(invoices=[InvoiceSummary(**row) for row in rows])

    async def get_invoice(self, db: AsyncSession, invoice_id: int) -> InvoiceDetailResponse:
        """
        Retrieve one invoice with its owning company nested under `company`.

        Raises:
            NotFoundError: No invoice with this id (→ 404)
        """
        invoice = None
        if is_storable_invoice_id(invoice_id):
            invoice = await run_query_one(
                db,
                select(*INVOICE_COLUMNS).where(Invoice.id == invoice_id),
                "get_invoice",
            )
        if invoice is None:
            logger.info("Invoice not found: %s", invoice_id)
            raise NotFoundError(
                f"No matching invoice id: {invoice_id}",
                resource="invoice",
                resource_id=invoice_id,
            )

        company = await run_query_one(
            db,
            select(Company.code, Company.name, Company.description)
            .where(Company.code == invoice["comp_code"]),
            "get_invoice_company",
        )
        if company is None:
            logger.warning(
                "Invoice %s references missing company %s",
                invoice_id,
                invoice["comp_code"],
            )

        return InvoiceDetailResponse(
            invoice=InvoiceWithCompany(
                **invoice,
                company=CompanyDetail(**company) if company is not None else None,
            )
        )

    async def create_invoice(self, db: AsyncSession, payload: InvoiceCreate) -> InvoiceResponse:
        """
        Insert a new invoice (paid = false, add_date = today) and return the row.

        Raises:
            ConstraintViolationError: comp_code names no company (→ 500)
        """
        row = await run_query_one(
            db,
            insert(Invoice)
            .values(comp_code=payload.comp_code, amt=payload.amt)
            .returning(*INVOICE_COLUMNS),
            "create_invoice",
        )
        logger.info("Invoice created: %s for company %s", row["id"], row["comp_code"])
        return InvoiceResponse(invoice=InvoiceRecord(**row))

    async def update_invoice(
        self, db: AsyncSession, invoice_id: int, payload: InvoiceUpdate
    ) -> InvoiceResponse:
        """
        Change the amount of an existing invoice.

        Raises:
            NotFoundError: No invoice with this id (→ 404)
        """
        row = None
        if is_storable_invoice_id(invoice_id):
            row = await run_query_one(
                db,
                update(Invoice)
                .where(Invoice.id == invoice_id)
                .values(amt=payload.amt)
                .returning(*INVOICE_COLUMNS)
                .execution_options(synchronize_session=False),
                "update_invoice",
            )
        if row is None:
            logger.info("Update of unknown invoice: %s", invoice_id)
            raise NotFoundError(
                f"No matching invoice with id: {invoice_id}",
                resource="invoice",
                resource_id=invoice_id,
            )

        logger.info("Invoice %s amount set to %s", invoice_id, payload.amt)
        return InvoiceResponse(invoice=InvoiceRecord(**row))

    async def delete_invoice(self, db: AsyncSession, invoice_id: int) -> StatusResponse:
        """
        Raises:
            NotFoundError: No invoice with this id (→ 404)
        """
        row = None
        if is_storable_invoice_id(invoice_id):
            row = await run_query_one(
                db,
                delete(Invoice)
                .where(Invoice.id == invoice_id)
                .returning(Invoice.id)
                .execution_options(synchronize_session=False),
                "delete_invoice",
            )
        if row is None:
            logger.info("Delete of unknown invoice: %s", invoice_id)
            raise NotFoundError(
                f"No matching invoices with id: {invoice_id}",
                resource="invoice",
                resource_id=invoice_id,
            )

        logger.info("Invoice deleted: %s", invoice_id)
        return StatusResponse()
