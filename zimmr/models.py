from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Craftsman(Base):
    """Tenant record: one per authenticated principal"""

    __tablename__ = "craftsmen"

    id = Column(Integer, primary_key=True, index=True)
    # Identity-provider user id; the tenant resolver is the only writer
    user_id = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True, index=True)
    specialty = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    # Phone assistant
    twilio_phone_number = Column(String(50), nullable=True, index=True)
    vapi_assistant_id = Column(String(255), nullable=True)
    assistant_enabled = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    customers = relationship("Customer", back_populates="craftsman", cascade="all, delete-orphan")
    appointments = relationship(
        "Appointment", back_populates="craftsman", cascade="all, delete-orphan"
    )


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    craftsman_id = Column(Integer, ForeignKey("craftsmen.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True, index=True)
    address = Column(Text, nullable=True)
    service_type = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    source = Column(String(50), nullable=True)  # manual, phone_ai_assistant
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    craftsman = relationship("Craftsman", back_populates="customers")
    appointments = relationship("Appointment", back_populates="customer")
    customer_notes = relationship("Note", back_populates="customer", cascade="all, delete-orphan")


class Call(Base):
    """Phone assistant call record"""

    __tablename__ = "calls"

    id = Column(Integer, primary_key=True, index=True)
    # Null for calls that could not be attributed to a craftsman
    craftsman_id = Column(Integer, ForeignKey("craftsmen.id"), nullable=True, index=True)
    caller_number = Column(String(50), nullable=True)
    caller_name = Column(String(255), nullable=True)
    call_reason = Column(Text, nullable=True)
    preferred_date = Column(String(100), nullable=True)  # as spoken/parsed by the assistant
    transcript = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    craftsman_id = Column(Integer, ForeignKey("craftsmen.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    call_id = Column(Integer, ForeignKey("calls.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(255), nullable=True)
    scheduled_at = Column(DateTime(timezone=True), nullable=False, index=True)  # stored in UTC
    duration = Column(Integer, default=60, nullable=False)  # minutes
    location = Column(Text, nullable=True)
    status = Column(String(50), default="scheduled", nullable=False)
    approval_status = Column(String(50), nullable=True)  # pending, approved, rejected
    notes = Column(Text, nullable=True)
    craftsman_notes = Column(Text, nullable=True)
    is_private = Column(Boolean, default=False, nullable=False)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    craftsman = relationship("Craftsman", back_populates="appointments")
    customer = relationship("Customer", back_populates="appointments")


class AppointmentApprovalLog(Base):
    __tablename__ = "appointment_approval_logs"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id", ondelete="CASCADE"))
    craftsman_id = Column(Integer, ForeignKey("craftsmen.id"), nullable=False)
    action = Column(String(20), nullable=False)  # approved, rejected
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Quote(Base):
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, index=True)
    craftsman_id = Column(Integer, ForeignKey("craftsmen.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True)
    status = Column(String(50), default="draft", nullable=False)  # draft, sent, accepted, converted
    amount = Column(Float, default=0.0, nullable=False)
    tax_rate = Column(Float, default=0.19, nullable=False)
    tax_amount = Column(Float, default=0.0, nullable=False)
    total_amount = Column(Float, default=0.0, nullable=False)
    notes = Column(Text, nullable=True)
    invoice_id = Column(Integer, nullable=True)  # set when converted
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    materials = relationship(
        "QuoteMaterial", cascade="all, delete-orphan", lazy="selectin", order_by="QuoteMaterial.id"
    )


class QuoteMaterial(Base):
    __tablename__ = "quote_materials"

    id = Column(Integer, primary_key=True, index=True)
    quote_id = Column(Integer, ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    unit = Column(String(50), nullable=True)
    quantity = Column(Float, default=1.0, nullable=False)
    unit_price = Column(Float, default=0.0, nullable=False)


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    craftsman_id = Column(Integer, ForeignKey("craftsmen.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True)
    quote_id = Column(Integer, ForeignKey("quotes.id", ondelete="SET NULL"), nullable=True)
    invoice_number = Column(String(50), nullable=False, index=True)
    status = Column(String(50), default="draft", nullable=False)  # draft, sent, paid, overdue
    amount = Column(Float, default=0.0, nullable=False)
    tax_rate = Column(Float, default=0.19, nullable=False)
    tax_amount = Column(Float, default=0.0, nullable=False)
    total_amount = Column(Float, default=0.0, nullable=False)
    notes = Column(Text, nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    materials = relationship(
        "InvoiceMaterial", cascade="all, delete-orphan", lazy="selectin", order_by="InvoiceMaterial.id"
    )


class InvoiceMaterial(Base):
    __tablename__ = "invoice_materials"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    unit = Column(String(50), nullable=True)
    quantity = Column(Float, default=1.0, nullable=False)
    unit_price = Column(Float, default=0.0, nullable=False)


class Material(Base):
    """Material catalog entry; default entries are shared by all craftsmen"""

    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, index=True)
    # Null for default entries
    craftsman_id = Column(Integer, ForeignKey("craftsmen.id"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    unit = Column(String(50), nullable=False)
    price = Column(Float, default=0.0, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Note(Base):
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, index=True)
    craftsman_id = Column(Integer, ForeignKey("craftsmen.id"), nullable=False, index=True)
    customer_id = Column(
        Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    appointment_id = Column(Integer, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    tags = Column(JSON, nullable=True)
    is_private = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", back_populates="customer_notes")


class TimeEntry(Base):
    __tablename__ = "time_entries"

    id = Column(Integer, primary_key=True, index=True)
    craftsman_id = Column(Integer, ForeignKey("craftsmen.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)  # stored in UTC
    end_time = Column(DateTime(timezone=True), nullable=True)
    duration_minutes = Column(Integer, nullable=True)
    is_billable = Column(Boolean, default=True, nullable=False)
    hourly_rate = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class FinanceGoal(Base):
    """Revenue goal of a craftsman for a period"""

    __tablename__ = "finances"
    __table_args__ = (UniqueConstraint("craftsman_id", "goal_period", name="uq_finances_craftsman_period"),)

    id = Column(Integer, primary_key=True, index=True)
    craftsman_id = Column(Integer, ForeignKey("craftsmen.id"), nullable=False, index=True)
    goal_amount = Column(Float, nullable=False)
    goal_period = Column(String(20), default="year", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
