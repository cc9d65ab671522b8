
import uuid
import enum
from sqlalchemy import Column, String, DateTime, func, DECIMAL, ForeignKey, Index, text, Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from gocinema.db.session import Base

class TicketStatus(str, enum.Enum):
    reserved = "reserved"
    paid = "paid"
    used = "used"
    cancelled = "cancelled"

# Statuses that hold a seat for the screening
ACTIVE_TICKET_STATUSES = (TicketStatus.reserved, TicketStatus.paid, TicketStatus.used)

class Ticket(Base):
    __tablename__ = "tickets"
    __table_args__ = (
        # At most one non-cancelled ticket per (screening, seat)
        Index(
            "uq_ticket_active_seat",
            "screening_id", "seat_id",
            unique=True,
            postgresql_where=text("status <> 'cancelled'"),
            sqlite_where=text("status <> 'cancelled'"),
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    screening_id = Column(UUID(as_uuid=True), ForeignKey("screenings.id"), nullable=False, index=True)
    seat_id = Column(UUID(as_uuid=True), ForeignKey("seats.id"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id"), nullable=True, index=True)
    price = Column(DECIMAL(10, 2), nullable=False)
    status = Column(SAEnum(TicketStatus, native_enum=False), nullable=False, default=TicketStatus.reserved, index=True)
    qr_code = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    screening = relationship("Screening", back_populates="tickets")
    seat = relationship("Seat", back_populates="tickets")
    user = relationship("User", back_populates="tickets")
    order = relationship("Order", back_populates="tickets")
    order_items = relationship("OrderItem", back_populates="ticket")
    payment = relationship("Payment", back_populates="ticket", uselist=False, cascade="all, delete")
