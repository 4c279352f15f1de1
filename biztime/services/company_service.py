"""
BizTime Backend — Company Service
===================================

What:  Business logic for the /companies resource: list, fetch with invoices,
       create, update, delete.
How:   Builds parameterized SQLAlchemy Core statements from the mapped
       columns and runs them through run_query(); an empty result on a keyed
       lookup or mutation becomes NotFoundError.
Who:   Called by the company route handlers.

Design Decision:
    CompanyService is stateless. It receives the request's session on every
    call, so one instance serves all requests and tests can pass a mock.

Integrity:
    Nothing here pre-checks duplicates or dependent invoices. Duplicate codes
    and deleting a company that still owns invoices are rejected by the store
    and surface as ConstraintViolationError from run_query().
"""

import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from biztime.database import run_query, run_query_one
from biztime.exceptions import NotFoundError
from biztime.models import Company, Invoice
from biztime.schemas.common import StatusResponse
from biztime.schemas.company import (
    CompanyCreate,
    CompanyDetail,
    CompanyDetailResponse,
    CompanyInvoice,
    CompanyListResponse,
    CompanyResponse,
    CompanySummary,
    CompanyUpdate,
    CompanyWithInvoices,
)

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = (Company.code, Company.name, Company.description)


def company_not_found(code: str) -> NotFoundError:
    return NotFoundError(
        f"No matching company: {code}",
        resource="company",
        resource_id=code,
    )


class CompanyService:
    """
    Business logic layer for company operations.

    Responsibilities:
        - list_companies(): code/name summaries in storage order
        - get_company(): one company plus all of its invoices
        - create_company(): insert and echo the new row
        - update_company(): change name/description of an existing code
        - delete_company(): remove a company by code
    """

    async def list_companies(self, db: AsyncSession) -> CompanyListResponse:
        """
        Query:
            SELECT code, name FROM companies
        """
        rows = await run_query(
            db, select(Company.code, Company.name), "list_companies"
        )
        return CompanyListResponse(companies=[CompanySummary(**row) for row in rows])

    async def get_company(self, db: AsyncSession, code: str) -> CompanyDetailResponse:
        """
        Retrieve one company and attach its invoices.

        Query plan:
            SELECT code, name, description FROM companies WHERE code = :code
            SELECT id, comp_code, amt, paid, add_date, paid_date
                FROM invoices WHERE comp_code = :code ORDER BY id
            → primary key lookup, then idx_invoices_comp_code

        Raises:
            NotFoundError: No company with this code (→ 404)
        """
        company = await run_query_one(
            db,
            select(*COMPANY_COLUMNS).where(Company.code == code),
            "get_company",
        )
        if company is None:
            logger.info("Company not found: %s", code)
            raise company_not_found(code)

        invoices = await run_query(
            db,
            select(
                Invoice.id,
                Invoice.comp_code,
                Invoice.amt,
                Invoice.paid,
                Invoice.add_date,
                Invoice.paid_date,
            )
            .where(Invoice.comp_code == code)
            .order_by(Invoice.id),
            "get_company_invoices",
        )

        return CompanyDetailResponse(
            company=CompanyWithInvoices(
                **company,
                invoices=[CompanyInvoice(**row) for row in invoices],
            )
        )

    async def create_company(self, db: AsyncSession, payload: CompanyCreate) -> CompanyResponse:
        """
        Insert a new company and return it as stored.

        Raises:
            ConstraintViolationError: The code is already taken (→ 500)
        """
        row = await run_query_one(
            db,
            insert(Company)
            .values(
                code=payload.code,
                name=payload.name,
                description=payload.description,
            )
            .returning(*COMPANY_COLUMNS),
            "create_company",
        )
        logger.info("Company created: %s", row["code"])
        return CompanyResponse(company=CompanyDetail(**row))

    async def update_company(
        self, db: AsyncSession, code: str, payload: CompanyUpdate
    ) -> CompanyResponse:
        """
        Replace name and description of the company identified by `code`.

        The code itself never changes; CompanyUpdate refuses bodies that try.

        Raises:
            NotFoundError: No company with this code (→ 404)
        """
        row = await run_query_one(
            db,
            update(Company)
            .where(Company.code == code)
            .values(name=payload.name, description=payload.description)
            .returning(*COMPANY_COLUMNS)
            .execution_options(synchronize_session=False),
            "update_company",
        )
        if row is None:
            logger.info("Update of unknown company: %s", code)
            raise company_not_found(code)

        logger.info("Company updated: %s", code)
        return CompanyResponse(company=CompanyDetail(**row))

    async def delete_company(self, db: AsyncSession, code: str) -> StatusResponse:
        """
        Delete the company identified by `code`.

        Raises:
            NotFoundError: No company with this code (→ 404)
            ConstraintViolationError: The company still owns invoices (→ 500)
        """
        row = await run_query_one(
            db,
            delete(Company)
            .where(Company.code == code)
            .returning(Company.code)
            .execution_options(synchronize_session=False),
            "delete_company",
        )
        if row is None:
            logger.info("Delete of unknown company: %s", code)
            raise company_not_found(code)

        logger.info("Company deleted: %s", code)
        return StatusResponse()
