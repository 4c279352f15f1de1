"""
BizTime Backend — Company Service Unit Tests
==============================================

What:  Tests for CompanyService with a mocked session (no real database).

What we test:
    ✅ Listing maps rows to {code, name} summaries
    ✅ Missing company raises NotFoundError carrying the code
    ✅ Company detail nests the invoices query result
    ✅ Update/delete that match no row raise NotFoundError
    ✅ Caller values are bound parameters, never SQL text
    ✅ Storage integrity failures surface as ConstraintViolationError
"""

import pytest
from datetime import date
from unittest.mock import AsyncMock

from sqlalchemy.exc import IntegrityError

from biztime.exceptions import ConstraintViolationError, NotFoundError
from biztime.schemas.company import CompanyCreate, CompanyUpdate
from biztime.services.company_service import CompanyService


def executed_statement(session, call_index=0):
    return session.execute.await_args_list[call_index].args[0]


class TestCompanyServiceList:
    """Tests for list_companies."""

    def setup_method(self):
        self.service = CompanyService()

    @pytest.mark.asyncio
    async def test_list_companies_maps_rows(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([
            {"code": "acme", "name": "Acme Corp"},
            {"code": "ibm", "name": "IBM"},
        ])

        result = await self.service.list_companies(mock_db_session)

        assert [c.code for c in result.companies] == ["acme", "ibm"]
        assert result.companies[1].name == "IBM"

    @pytest.mark.asyncio
    async def test_list_companies_empty(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([])

        result = await self.service.list_companies(mock_db_session)

        assert result.companies == []


class TestCompanyServiceGet:
    """Tests for get_company."""

    def setup_method(self):
        self.service = CompanyService()

    @pytest.mark.asyncio
    async def test_get_company_not_found(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([])

        with pytest.raises(NotFoundError, match="No matching company: nope"):
            await self.service.get_company(mock_db_session, "nope")

        # The invoices query never runs for a missing company
        assert mock_db_session.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_get_company_attaches_invoices(self, mock_db_session, make_result):
        company_row = {"code": "acme", "name": "Acme Corp", "description": "Maker"}
        invoice_rows = [
            {
                "id": 3,
                "comp_code": "acme",
                "amt": 250.0,
                "paid": False,
                "add_date": date(2026, 10, 1),
                "paid_date": None,
            },
        ]
        mock_db_session.execute = AsyncMock(
            side_effect=[make_result([company_row]), make_result(invoice_rows)]
        )

        result = await self.service.get_company(mock_db_session, "acme")

        assert result.company.description == "Maker"
        assert len(result.company.invoices) == 1
        assert result.company.invoices[0].id == 3
        assert result.company.invoices[0].comp_code == "acme"

    @pytest.mark.asyncio
    async def test_get_company_binds_code_as_parameter(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([])
        code = "x'; DROP TABLE companies; --"

        with pytest.raises(NotFoundError):
            await self.service.get_company(mock_db_session, code)

        compiled = executed_statement(mock_db_session).compile()
        assert code in compiled.params.values()
        assert code not in str(compiled)


class TestCompanyServiceMutations:
    """Tests for create/update/delete."""

    def setup_method(self):
        self.service = CompanyService()

    @pytest.mark.asyncio
    async def test_create_company_returns_stored_row(self, mock_db_session, make_result):
        row = {"code": "ibm", "name": "IBM", "description": "Big Blue"}
        mock_db_session.execute.return_value = make_result([row])

        result = await self.service.create_company(mock_db_session, CompanyCreate(**row))

        assert result.company.model_dump() == row

    @pytest.mark.asyncio
    async def test_create_company_duplicate_code(self, mock_db_session):
        mock_db_session.execute.side_effect = IntegrityError(
            "INSERT INTO companies", {}, Exception("UNIQUE constraint failed: companies.code")
        )

        with pytest.raises(ConstraintViolationError):
            await self.service.create_company(
                mock_db_session,
                CompanyCreate(code="ibm", name="IBM", description="Big Blue"),
            )

    @pytest.mark.asyncio
    async def test_update_company_not_found(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([])

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.update_company(
                mock_db_session, "ghost", CompanyUpdate(name="G", description="D")
            )

        assert exc_info.value.message == "No matching company: ghost"
        assert exc_info.value.context["resource_id"] == "ghost"

    @pytest.mark.asyncio
    async def test_update_company_returns_updated_row(self, mock_db_session, make_result):
        row = {"code": "acme", "name": "Acme Inc", "description": "Renamed"}
        mock_db_session.execute.return_value = make_result([row])

        result = await self.service.update_company(
            mock_db_session, "acme", CompanyUpdate(name="Acme Inc", description="Renamed")
        )

        assert result.company.code == "acme"
        assert result.company.name == "Acme Inc"

    @pytest.mark.asyncio
    async def test_delete_company(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([{"code": "acme"}])

        result = await self.service.delete_company(mock_db_session, "acme")

        assert result.status == "deleted"

    @pytest.mark.asyncio
    async def test_delete_company_not_found(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([])

        with pytest.raises(NotFoundError, match="No matching company: acme"):
            await self.service.delete_company(mock_db_session, "acme")
