"""
BizTime Backend — Invoice Service Unit Tests
==============================================

What:  Tests for InvoiceService with a mocked session (no real database).

What we test:
    ✅ Invoice detail resolves the owning company from comp_code
    ✅ Each not-found path carries its own message and the id
    ✅ Unknown comp_code on create surfaces as ConstraintViolationError
    ✅ Update sends only the amount
"""

import pytest
from datetime import date
from unittest.mock import AsyncMock

from sqlalchemy.exc import IntegrityError

from biztime.exceptions import ConstraintViolationError, NotFoundError
from biztime.schemas.invoice import InvoiceCreate, InvoiceUpdate
from biztime.services.invoice_service import InvoiceService


def invoice_row(**overrides):
    row = {
        "id": 3,
        "comp_code": "acme",
        "amt": 100.0,
        "paid": False,
        "add_date": date(2026, 10, 19),
        "paid_date": None,
    }
    row.update(overrides)
    return row


class TestInvoiceServiceRead:
    """Tests for list_invoices and get_invoice."""

    def setup_method(self):
        self.service = InvoiceService()

    @pytest.mark.asyncio
    async def test_list_invoices(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([
            {"id": 1, "comp_code": "acme"},
            {"id": 2, "comp_code": "ibm"},
        ])

        result = await self.service.list_invoices(mock_db_session)

        assert [(i.id, i.comp_code) for i in result.invoices] == [(1, "acme"), (2, "ibm")]

    @pytest.mark.asyncio
    async def test_get_invoice_resolves_company(self, mock_db_session, make_result):
        company = {"code": "acme", "name": "Acme Corp", "description": "Maker"}
        mock_db_session.execute = AsyncMock(
            side_effect=[make_result([invoice_row()]), make_result([company])]
        )

        result = await self.service.get_invoice(mock_db_session, 3)

        assert result.invoice.id == 3
        assert result.invoice.company.code == "acme"
        assert result.invoice.company.name == "Acme Corp"

        company_query = mock_db_session.execute.await_args_list[1].args[0].compile()
        assert "acme" in company_query.params.values()

    @pytest.mark.asyncio
    async def test_get_invoice_company_missing(self, mock_db_session, make_result):
        mock_db_session.execute = AsyncMock(
            side_effect=[make_result([invoice_row()]), make_result([])]
        )

        result = await self.service.get_invoice(mock_db_session, 3)

        assert result.invoice.company is None

    @pytest.mark.asyncio
    async def test_get_invoice_not_found(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([])

        with pytest.raises(NotFoundError, match="No matching invoice id: 42"):
            await self.service.get_invoice(mock_db_session, 42)


class TestInvoiceServiceMutations:
    """Tests for create/update/delete."""

    def setup_method(self):
        self.service = InvoiceService()

    @pytest.mark.asyncio
    async def test_create_invoice_returns_full_row(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([invoice_row(id=7)])

        result = await self.service.create_invoice(
            mock_db_session, InvoiceCreate(comp_code="acme", amt=100)
        )

        assert result.invoice.id == 7
        assert result.invoice.paid is False
        assert result.invoice.paid_date is None

    @pytest.mark.asyncio
    async def test_create_invoice_unknown_company(self, mock_db_session):
        mock_db_session.execute.side_effect = IntegrityError(
            "INSERT INTO invoices", {}, Exception("FOREIGN KEY constraint failed")
        )

        with pytest.raises(ConstraintViolationError):
            await self.service.create_invoice(
                mock_db_session, InvoiceCreate(comp_code="nope", amt=10)
            )

    @pytest.mark.asyncio
    async def test_update_invoice_sets_only_amount(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([invoice_row(amt=55.5)])

        result = await self.service.update_invoice(
            mock_db_session, 3, InvoiceUpdate(amt=55.5)
        )

        assert result.invoice.amt == 55.5
        statement = mock_db_session.execute.await_args.args[0]
        assert set(statement.compile().params) >= {"amt"}
        assert "comp_code" not in statement.compile().params

    @pytest.mark.asyncio
    async def test_update_invoice_not_found(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([])

        with pytest.raises(NotFoundError, match="No matching invoice with id: 5"):
            await self.service.update_invoice(mock_db_session, 5, InvoiceUpdate(amt=1))

    @pytest.mark.asyncio
    async def test_delete_invoice_not_found(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([])

        with pytest.raises(NotFoundError, match="No matching invoices with id: 9"):
            await self.service.delete_invoice(mock_db_session, 9)

    @pytest.mark.asyncio
    async def test_delete_invoice(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([{"id": 9}])

        result = await self.service.delete_invoice(mock_db_session, 9)

        assert result.status == "deleted"


class TestInvoiceIdRange:
    """Ids the id column can never hold are unknown ids, not driver errors."""

    def setup_method(self):
        self.service = InvoiceService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("invoice_id", [0, -1, 2**31, 10**20])
    async def test_get_out_of_range(self, mock_db_session, invoice_id):
        with pytest.raises(NotFoundError, match=f"No matching invoice id: {invoice_id}"):
            await self.service.get_invoice(mock_db_session, invoice_id)

        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_out_of_range(self, mock_db_session):
        with pytest.raises(NotFoundError, match="No matching invoice with id: 2147483648"):
            await self.service.update_invoice(mock_db_session, 2**31, InvoiceUpdate(amt=1))

        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_out_of_range(self, mock_db_session):
        with pytest.raises(NotFoundError, match="No matching invoices with id: 2147483648"):
            await self.service.delete_invoice(mock_db_session, 2**31)

        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_largest_id_is_queried(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result([])

        with pytest.raises(NotFoundError):
            await self.service.get_invoice(mock_db_session, 2**31 - 1)

        mock_db_session.execute.assert_awaited_once()
