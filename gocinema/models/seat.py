
import uuid
import enum
from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from gocinema.db.session import Base

class SeatType(str, enum.Enum):
    standard = "standard"
    vip = "vip"
    disabled = "disabled"

class Seat(Base):
    __tablename__ = "seats"
    __table_args__ = (
        UniqueConstraint("hall_id", "row", "number", name="uq_seat_hall_row_number"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    hall_id = Column(UUID(as_uuid=True), ForeignKey("halls.id"), nullable=False, index=True)
    row = Column(String(5), nullable=False)
    number = Column(Integer, nullable=False)
    seat_type = Column(SAEnum(SeatType, native_enum=False), nullable=False, default=SeatType.standard)

    hall = relationship("Hall", back_populates="seats")
    # Only cancelled tickets can remain when a seat is deleted
    tickets = relationship("Ticket", back_populates="seat", cascade="all, delete")
