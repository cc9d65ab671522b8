from typing import Optional, List
from pydantic import BaseModel, UUID4, field_validator
from decimal import Decimal
from datetime import date, datetime

from gocinema.utils.dates import ensure_utc


# Movie: shared fields
class MovieBase(BaseModel):
    title: str
    image: Optional[str] = None
    duration: int
    rating: Decimal
    genre: str
    release_date: date
    description: Optional[str] = None
    trailer_url: Optional[str] = None
    is_active: bool = True


class MovieCreate(MovieBase):
    slug: Optional[str] = None


class MovieUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    image: Optional[str] = None
    duration: Optional[int] = None
    rating: Optional[Decimal] = None
    genre: Optional[str] = None
    release_date: Optional[date] = None
    description: Optional[str] = None
    trailer_url: Optional[str] = None
    is_active: Optional[bool] = None


class Movie(MovieBase):
    id: UUID4
    slug: str
    created_at: datetime

    class Config:
        from_attributes = True


# Compact movie for nested responses (screening, ticket, premiere)
class MovieSummary(BaseModel):
    id: UUID4
    title: str
    slug: str
    image: Optional[str] = None
    duration: int
    genre: str

    class Config:
        from_attributes = True


# Upcoming screening inside a movie detail
class MovieScreening(BaseModel):
    id: UUID4
    hall_id: UUID4
    start_time: datetime
    end_time: datetime
    base_price: Decimal

    class Config:
        from_attributes = True


# GET /movies/{id_or_slug}
class MovieDetail(Movie):
    screenings: List[MovieScreening] = []


# Premiere Schemas
class PremiereCreate(BaseModel):
    movie_id: UUID4
    premiere_date: datetime
    description: Optional[str] = None
    is_active: bool = True

    @field_validator("premiere_date")
    @classmethod
    def to_utc(cls, v):
        return ensure_utc(v)


class PremiereUpdate(BaseModel):
    movie_id: Optional[UUID4] = None
    premiere_date: Optional[datetime] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("premiere_date")
    @classmethod
    def to_utc(cls, v):
        return ensure_utc(v)


class Premiere(BaseModel):
    id: UUID4
    movie_id: UUID4
    premiere_date: datetime
    description: Optional[str] = None
    is_active: bool
    movie: Optional[MovieSummary] = None

    class Config:
        from_attributes = True
