
import uuid
from sqlalchemy import Column, String, Integer, DateTime, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from gocinema.db.session import Base

class Hall(Base):
    __tablename__ = "halls"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False, default=0) # kept equal to the seat count
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    seats = relationship("Seat", back_populates="hall", cascade="all, delete")
    screenings = relationship("Screening", back_populates="hall")
