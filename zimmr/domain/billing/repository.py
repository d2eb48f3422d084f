"""Billing repository - quotes, invoices and their line items"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Invoice, InvoiceMaterial, Quote, QuoteMaterial


class QuoteRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_for_craftsman(self, craftsman_id: int) -> list[Quote]:
        return (
            self.db.query(Quote)
            .filter(Quote.craftsman_id == craftsman_id)
            .order_by(Quote.created_at.desc(), Quote.id.desc())
            .all()
        )

    def get(self, quote_id: int, craftsman_id: int) -> Optional[Quote]:
        return (
            self.db.query(Quote)
            .filter(Quote.id == quote_id, Quote.craftsman_id == craftsman_id)
            .first()
        )

    def add(self, quote: Quote, materials: list[dict]) -> None:
        """Stage a quote with its line items; the caller commits"""
        quote.materials = [QuoteMaterial(**item) for item in materials]
        self.db.add(quote)

    def replace_materials(self, quote: Quote, materials: list[dict]) -> None:
        quote.materials = [QuoteMaterial(**item) for item in materials]

    def delete(self, quote: Quote) -> None:
        """Stage the deletion; the caller commits"""
        self.db.delete(quote)


class InvoiceRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_for_craftsman(self, craftsman_id: int) -> list[Invoice]:
        return (
            self.db.query(Invoice)
            .filter(Invoice.craftsman_id == craftsman_id)
            .order_by(Invoice.created_at.desc(), Invoice.id.desc())
            .all()
        )

    def get(self, invoice_id: int, craftsman_id: int) -> Optional[Invoice]:
        return (
            self.db.query(Invoice)
            .filter(Invoice.id == invoice_id, Invoice.craftsman_id == craftsman_id)
            .first()
        )

    def number_exists(self, craftsman_id: int, invoice_number: str) -> bool:
        return (
            self.db.query(Invoice.id)
            .filter(Invoice.craftsman_id == craftsman_id, Invoice.invoice_number == invoice_number)
            .first()
            is not None
        )

    def count_with_prefix(self, craftsman_id: int, prefix: str) -> int:
        return (
            self.db.query(func.count(Invoice.id))
            .filter(Invoice.craftsman_id == craftsman_id, Invoice.invoice_number.like(f"{prefix}%"))
            .scalar()
            or 0
        )

    def add(self, invoice: Invoice, materials: list[dict]) -> None:
        invoice.materials = [InvoiceMaterial(**item) for item in materials]
        self.db.add(invoice)

    def replace_materials(self, invoice: Invoice, materials: list[dict]) -> None:
        invoice.materials = [InvoiceMaterial(**item) for item in materials]

    def delete(self, invoice: Invoice) -> None:
        self.db.delete(invoice)


def generate_invoice_number(repo: InvoiceRepository, craftsman_id: int, now: Optional[datetime] = None) -> str:
    """Next free INV-<year>-<sequence> number of the craftsman"""
    year = (now or datetime.now()).year
    prefix = f"INV-{year}-"
    sequence = repo.count_with_prefix(craftsman_id, prefix) + 1
    number = f"{prefix}{sequence:04d}"
    while repo.number_exists(craftsman_id, number):
        sequence += 1
        number = f"{prefix}{sequence:04d}"
    return number
