"""Billing router - quotes, invoices and quote conversion"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_craftsman_id
from ...database import get_db
from ...shared.schemas import MessageResponse
from .schemas import (
    InvoiceCreate,
    InvoiceResponse,
    InvoiceUpdate,
    QuoteCreate,
    QuoteResponse,
    QuoteUpdate,
)
from .service import InvoiceService, QuoteService

quotes_router = APIRouter(prefix="/quotes", tags=["Quotes"])
invoices_router = APIRouter(prefix="/invoices", tags=["Invoices"])


def get_quote_service(db: Session = Depends(get_db)) -> QuoteService:
    return QuoteService(db)


def get_invoice_service(db: Session = Depends(get_db)) -> InvoiceService:
    return InvoiceService(db)


@quotes_router.get("", response_model=list[QuoteResponse])
async def get_quotes(
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: QuoteService = Depends(get_quote_service),
):
    return service.list_quotes(craftsman_id)


@quotes_router.get("/{quote_id}", response_model=QuoteResponse)
async def get_quote(
    quote_id: int,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: QuoteService = Depends(get_quote_service),
):
    return service.get_quote(quote_id, craftsman_id)


@quotes_router.post("", response_model=QuoteResponse, status_code=201)
async def create_quote(
    data: QuoteCreate,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: QuoteService = Depends(get_quote_service),
):
    return service.create_quote(data, craftsman_id)


@quotes_router.put("/{quote_id}", response_model=QuoteResponse)
async def update_quote(
    quote_id: int,
    data: QuoteUpdate,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: QuoteService = Depends(get_quote_service),
):
    return service.update_quote(quote_id, data, craftsman_id)


@quotes_router.delete("/{quote_id}", response_model=MessageResponse)
async def delete_quote(
    quote_id: int,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: QuoteService = Depends(get_quote_service),
):
    return service.delete_quote(quote_id, craftsman_id)


@quotes_router.post("/{quote_id}/convert-to-invoice", response_model=InvoiceResponse, status_code=201)
async def convert_quote_to_invoice(
    quote_id: int,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: QuoteService = Depends(get_quote_service),
):
    """Create a draft invoice from the quote; a quote converts only once"""
    return service.convert_to_invoice(quote_id, craftsman_id)


@invoices_router.get("", response_model=list[InvoiceResponse])
async def get_invoices(
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.list_invoices(craftsman_id)


@invoices_router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: int,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.get_invoice(invoice_id, craftsman_id)


@invoices_router.post("", response_model=InvoiceResponse, status_code=201)
async def create_invoice(
    data: InvoiceCreate,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.create_invoice(data, craftsman_id)


@invoices_router.put("/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice(
    invoice_id: int,
    data: InvoiceUpdate,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.update_invoice(invoice_id, data, craftsman_id)


@invoices_router.delete("/{invoice_id}", response_model=MessageResponse)
async def delete_invoice(
    invoice_id: int,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.delete_invoice(invoice_id, craftsman_id)
