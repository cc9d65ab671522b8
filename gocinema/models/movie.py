
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Date, func, Text, DECIMAL, Integer, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from gocinema.db.session import Base

class Movie(Base):
    __tablename__ = "movies"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    image = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False) # minutes
    rating = Column(DECIMAL(3, 1), nullable=False)
    genre = Column(String(100), nullable=False)
    release_date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    trailer_url = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    # Relationships
    screenings = relationship("Screening", back_populates="movie", cascade="all, delete")
    premieres = relationship("Premiere", back_populates="movie", cascade="all, delete")

class Premiere(Base):
    __tablename__ = "premieres"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    movie_id = Column(UUID(as_uuid=True), ForeignKey("movies.id"), nullable=False, index=True)
    premiere_date = Column(DateTime(timezone=True), nullable=False, index=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    movie = relationship("Movie", back_populates="premieres")
