"""
BizTime Backend — Company Route Handlers
==========================================

What:  HTTP handlers for /companies and /companies/{code}.
How:   register_company_routes() attaches the handlers to a router handed in
       by the application factory. Handlers extract path/body data, delegate
       to CompanyService, and return the service's response model.
Who:   Wired once by create_app() in main.py.

Validation:
    Request bodies are parsed into CompanyCreate / CompanyUpdate. A missing
    body, a missing field, or a `code` key on update is a validation failure
    answered with 400 by the handler registered in main.py.
"""

import logging

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from biztime.database import get_db_session
from biztime.schemas.common import ErrorResponse, StatusResponse
from biztime.schemas.company import (
    CompanyCreate,
    CompanyDetailResponse,
    CompanyListResponse,
    CompanyResponse,
    CompanyUpdate,
)
from biztime.services.company_service import CompanyService

logger = logging.getLogger(__name__)

TAGS = ["Companies"]


def register_company_routes(router: APIRouter, service: CompanyService) -> None:
    """Attach the five company handlers to `router`, all backed by `service`."""

    @router.get(
        "/companies",
        response_model=CompanyListResponse,
        tags=TAGS,
        summary="List companies",
        description="Returns every company as a {code, name} summary, in storage order.",
    )
    async def list_companies(
        db: AsyncSession = Depends(get_db_session),
    ) -> CompanyListResponse:
        return await service.list_companies(db)

    @router.get(
        "/companies/{code}",
        response_model=CompanyDetailResponse,
        tags=TAGS,
        responses={404: {"description": "Company not found", "model": ErrorResponse}},
        summary="Get a company with its invoices",
    )
    async def get_company(
        code: str,
        db: AsyncSession = Depends(get_db_session),
    ) -> CompanyDetailResponse:
        return await service.get_company(db, code)

    @router.post(
        "/companies",
        status_code=201,
        response_model=CompanyResponse,
        tags=TAGS,
        responses={
            400: {"description": "Missing or invalid fields", "model": ErrorResponse},
            500: {"description": "Duplicate company code", "model": ErrorResponse},
        },
        summary="Create a company",
    )
    async def create_company(
        payload: CompanyCreate = Body(...),
        db: AsyncSession = Depends(get_db_session),
    ) -> CompanyResponse:
        return await service.create_company(db, payload)

    @router.put(
        "/companies/{code}",
        response_model=CompanyResponse,
        tags=TAGS,
        responses={
            400: {"description": "Missing fields or attempt to change code", "model": ErrorResponse},
            404: {"description": "Company not found", "model": ErrorResponse},
        },
        summary="Update a company's name and description",
    )
    async def update_company(
        code: str,
        payload: CompanyUpdate = Body(...),
        db: AsyncSession = Depends(get_db_session),
    ) -> CompanyResponse:
        return await service.update_company(db, code, payload)

    @router.delete(
        "/companies/{code}",
        response_model=StatusResponse,
        tags=TAGS,
        responses={
            404: {"description": "Company not found", "model": ErrorResponse},
            500: {"description": "Company still owns invoices", "model": ErrorResponse},
        },
        summary="Delete a company",
    )
    async def delete_company(
        code: str,
        db: AsyncSession = Depends(get_db_session),
    ) -> StatusResponse:
        return await service.delete_company(db, code)

    logger.debug("Company routes registered")
