# Services package init
"""
BizTime Backend — Services Layer
==================================

Service Inventory:
    - CompanyService: list/get/create/update/delete companies
    - InvoiceService: list/get/create/update/delete invoices

Services are stateless: every method takes the request's AsyncSession, so
create_app() builds one instance of each and tests call them with a mock
session.
"""
