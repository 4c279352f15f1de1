"""
BizTime Backend — Invoice Route Handlers
==========================================

What:  HTTP handlers for /invoices and /invoices/{id}.
How:   register_invoice_routes() attaches the handlers to a router handed in
       by the application factory; each handler delegates to InvoiceService.

Path parameter:
    `invoice_id` is declared as int, so /invoices/abc is a validation
    failure (400) and never reaches the database. Integer ids the column
    cannot hold are turned into 404s by InvoiceService.
"""

import logging

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from biztime.database import get_db_session
from biztime.schemas.common import ErrorResponse, StatusResponse
from biztime.schemas.invoice import (
    InvoiceCreate,
    InvoiceDetailResponse,
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceUpdate,
)
from biztime.services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)

TAGS = ["Invoices"]


def register_invoice_routes(router: APIRouter, service: InvoiceService) -> None:
    """Attach the five invoice handlers to `router`, all backed by `service`."""

    @router.get(
        "/invoices",
        response_model=InvoiceListResponse,
        tags=TAGS,
        summary="List invoices",
        description="Returns every invoice as an {id, comp_code} summary, in storage order.",
    )
    async def list_invoices(
        db: AsyncSession = Depends(get_db_session),
    ) -> InvoiceListResponse:
        return await service.list_invoices(db)

    @router.get(
        "/invoices/{invoice_id}",
        response_model=InvoiceDetailResponse,
        tags=TAGS,
        responses={404: {"description": "Invoice not found", "model": ErrorResponse}},
        summary="Get an invoice with its company",
    )
    async def get_invoice(
        invoice_id: int,
        db: AsyncSession = Depends(get_db_session),
    ) -> InvoiceDetailResponse:
        return await service.get_invoice(db, invoice_id)

    @router.post(
        "/invoices",
        status_code=201,
        response_model=InvoiceResponse,
        tags=TAGS,
        responses={
            400: {"description": "Missing comp_code or invalid amt", "model": ErrorResponse},
            500: {"description": "comp_code references no company", "model": ErrorResponse},
        },
        summary="Create an invoice",
    )
    async def create_invoice(
        payload: InvoiceCreate = Body(...),
        db: AsyncSession = Depends(get_db_session),
    ) -> InvoiceResponse:
        return await service.create_invoice(db, payload)

    @router.put(
        "/invoices/{invoice_id}",
        response_model=InvoiceResponse,
        tags=TAGS,
        responses={
            400: {"description": "Missing or non-positive amt", "model": ErrorResponse},
            404: {"description": "Invoice not found", "model": ErrorResponse},
        },
        summary="Change an invoice's amount",
    )
    async def update_invoice(
        invoice_id: int,
        payload: InvoiceUpdate = Body(...),
        db: AsyncSession = Depends(get_db_session),
    ) -> InvoiceResponse:
        return await service.update_invoice(db, invoice_id, payload)

    @router.delete(
        "/invoices/{invoice_id}",
        response_model=StatusResponse,
        tags=TAGS,
        responses={404: {"description": "Invoice not found", "model": ErrorResponse}},
        summary="Delete an invoice",
    )
    async def delete_invoice(
        invoice_id: int,
        db: AsyncSession = Depends(get_db_session),
    ) -> StatusResponse:
        return await service.delete_invoice(db, invoice_id)

    logger.debug("Invoice routes registered")
