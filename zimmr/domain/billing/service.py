"""
Quote and invoice business logic.

Totals are always computed here from the line items; client-supplied amounts
are never stored. A quote converts to at most one invoice.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import NotFoundError, UpstreamError, ValidationFailure
from ...models import Invoice, Quote
from ..appointments.repository import AppointmentRepository
from ..customers.repository import CustomerRepository
from .repository import InvoiceRepository, QuoteRepository, generate_invoice_number

logger = logging.getLogger(__name__)


def compute_totals(materials: list[dict], tax_rate: float) -> dict:
    amount = round(sum(item["quantity"] * item["unit_price"] for item in materials), 2)
    tax_amount = round(amount * tax_rate, 2)
    return {"amount": amount, "tax_amount": tax_amount, "total_amount": round(amount + tax_amount, 2)}


def _material_dicts(materials) -> list[dict]:
    return [
        {"name": m.name, "unit": m.unit, "quantity": m.quantity, "unit_price": m.unit_price}
        for m in materials
    ]


class _BillingBase:
    def __init__(self, db: Session):
        self.db = db
        self.customers = CustomerRepository(db)
        self.appointments = AppointmentRepository(db)

    def _check_references(self, data: dict, craftsman_id: int) -> None:
        """Customer and appointment references must belong to the same craftsman"""
        customer_id = data.get("customer_id")
        if customer_id is not None and not self.customers.get(customer_id, craftsman_id):
            raise NotFoundError("Customer not found")
        appointment_id = data.get("appointment_id")
        if appointment_id is not None and not self.appointments.get(appointment_id, craftsman_id):
            raise NotFoundError("Appointment not found")

    def _commit(self, what: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError(f"Failed to save {what}", cause=e) from e


class QuoteService(_BillingBase):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repo = QuoteRepository(db)
        self.invoices = InvoiceRepository(db)

    def list_quotes(self, craftsman_id: int) -> list[Quote]:
        return self.repo.list_for_craftsman(craftsman_id)

    def get_quote(self, quote_id: int, craftsman_id: int) -> Quote:
        quote = self.repo.get(quote_id, craftsman_id)
        if not quote:
            raise NotFoundError("Quote not found")
        return quote

    def create_quote(self, data, craftsman_id: int) -> Quote:
        payload = data.model_dump()
        materials = payload.pop("materials")
        self._check_references(payload, craftsman_id)

        quote = Quote(craftsman_id=craftsman_id, **payload, **compute_totals(materials, payload["tax_rate"]))
        self.repo.add(quote, materials)
        self._commit("quote")
        self.db.refresh(quote)
        logger.info(f"Created quote {quote.id} for craftsman {craftsman_id}")
        return quote

    def update_quote(self, quote_id: int, data, craftsman_id: int) -> Quote:
        quote = self.get_quote(quote_id, craftsman_id)
        updates = data.model_dump(exclude_unset=True)
        materials = updates.pop("materials", None)
        self._check_references(updates, craftsman_id)

        for key, value in updates.items():
            if value is not None or key in ("customer_id", "appointment_id", "notes"):
                setattr(quote, key, value)
        if materials is not None:
            self.repo.replace_materials(quote, materials)

        totals = compute_totals(_material_dicts(quote.materials), quote.tax_rate)
        for key, value in totals.items():
            setattr(quote, key, value)
        self._commit("quote")
        self.db.refresh(quote)
        return quote

    def delete_quote(self, quote_id: int, craftsman_id: int) -> dict:
        quote = self.get_quote(quote_id, craftsman_id)
        if quote.invoice_id is not None:
            raise ValidationFailure("Quote has been converted to an invoice and cannot be deleted")
        self.repo.delete(quote)
        self._commit("quote")
        logger.info(f"Deleted quote {quote_id} for craftsman {craftsman_id}")
        return {"message": "Quote deleted successfully"}

    def convert_to_invoice(self, quote_id: int, craftsman_id: int) -> Invoice:
        quote = self.get_quote(quote_id, craftsman_id)
        if quote.status == "converted" or quote.invoice_id is not None:
            raise ValidationFailure("Quote has already been converted to an invoice")

        invoice = Invoice(
            craftsman_id=craftsman_id,
            customer_id=quote.customer_id,
            appointment_id=quote.appointment_id,
            quote_id=quote.id,
            invoice_number=generate_invoice_number(self.invoices, craftsman_id),
            status="draft",
            amount=quote.amount,
            tax_rate=quote.tax_rate,
            tax_amount=quote.tax_amount,
            total_amount=quote.total_amount,
            notes=quote.notes,
        )
        self.invoices.add(invoice, _material_dicts(quote.materials))
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to create invoice", cause=e) from e

        quote.status = "converted"
        quote.invoice_id = invoice.id
        self._commit("invoice")
        self.db.refresh(invoice)
        logger.info(f"Converted quote {quote.id} to invoice {invoice.invoice_number}")
        return invoice


class InvoiceService(_BillingBase):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repo = InvoiceRepository(db)
        self.quotes = QuoteRepository(db)

    def list_invoices(self, craftsman_id: int) -> list[Invoice]:
        return self.repo.list_for_craftsman(craftsman_id)

    def get_invoice(self, invoice_id: int, craftsman_id: int) -> Invoice:
        invoice = self.repo.get(invoice_id, craftsman_id)
        if not invoice:
            raise NotFoundError("Invoice not found")
        return invoice

    def create_invoice(self, data, craftsman_id: int) -> Invoice:
        payload = data.model_dump()
        materials = payload.pop("materials")
        self._check_references(payload, craftsman_id)

        invoice = Invoice(
            craftsman_id=craftsman_id,
            invoice_number=generate_invoice_number(self.repo, craftsman_id),
            **payload,
            **compute_totals(materials, payload["tax_rate"]),
        )
        self.repo.add(invoice, materials)
        self._commit("invoice")
        self.db.refresh(invoice)
        logger.info(f"Created invoice {invoice.invoice_number} for craftsman {craftsman_id}")
        return invoice

    def update_invoice(self, invoice_id: int, data, craftsman_id: int) -> Invoice:
        invoice = self.get_invoice(invoice_id, craftsman_id)
        updates = data.model_dump(exclude_unset=True)
        materials = updates.pop("materials", None)
        self._check_references(updates, craftsman_id)

        for key, value in updates.items():
            if value is not None or key in ("customer_id", "appointment_id", "notes", "due_date"):
                setattr(invoice, key, value)
        if materials is not None:
            self.repo.replace_materials(invoice, materials)

        totals = compute_totals(_material_dicts(invoice.materials), invoice.tax_rate)
        for key, value in totals.items():
            setattr(invoice, key, value)
        self._commit("invoice")
        self.db.refresh(invoice)
        return invoice

    def delete_invoice(self, invoice_id: int, craftsman_id: int) -> dict:
        """Delete an invoice; a quote it was converted from becomes convertible again"""
        invoice = self.get_invoice(invoice_id, craftsman_id)
        quote_id = invoice.quote_id
        quote = self.quotes.get(quote_id, craftsman_id) if quote_id else None
        released = quote is not None and quote.invoice_id == invoice.id
        if released:
            quote.invoice_id = None
            quote.status = "accepted"
        self.repo.delete(invoice)
        self._commit("invoice")
        if released:
            logger.info(f"Quote {quote_id} released by deletion of invoice {invoice_id}")
        return {"message": "Invoice deleted successfully"}
