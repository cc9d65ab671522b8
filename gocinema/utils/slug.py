
import re
import uuid
from typing import Optional
from sqlalchemy.orm import Session
from gocinema.models.movie import Movie


def generate_slug(text: str) -> str:
    """Convert text to a URL-safe slug: lowercase, hyphens, no special chars."""
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")
    return slug


def slug_taken(db: Session, slug: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
    query = db.query(Movie.id).filter(Movie.slug == slug)
    if exclude_id is not None:
        query = query.filter(Movie.id != exclude_id)
    return query.first() is not None


def make_unique_slug(db: Session, title_text: str) -> str:
    """Generate a unique slug, appending a short random suffix on collision."""
    base_slug = generate_slug(title_text) or uuid.uuid4().hex[:8]
    slug = base_slug
    while slug_taken(db, slug):
        slug = f"{base_slug}-{uuid.uuid4().hex[:6]}"
    return slug
