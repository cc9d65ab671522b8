"""Hall scheduling: keeps screenings in one hall from overlapping."""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from gocinema.core.exceptions import ConflictError, InvalidInputError
from gocinema.models.screening import Screening

logger = logging.getLogger(__name__)

HALL_BUSY = "Այս ժամանակահատվածում դահլիճը արդեն զբաղված է"
END_BEFORE_START = "Ավարտի ժամը պետք է լինի ավելի ուշ, քան սկզբի ժամը"


def find_overlapping_screening(
    db: Session,
    hall_id: UUID,
    start_time: datetime,
    end_time: datetime,
    exclude_id: Optional[UUID] = None,
) -> Optional[Screening]:
    """Return a screening in the hall whose interval touches [start_time, end_time].

    Bounds are inclusive, so a screening ending exactly when another starts
    counts as an overlap.
    """
    query = db.query(Screening).filter(
        Screening.hall_id == hall_id,
        or_(
            # existing one is running when the new one starts
            and_(Screening.start_time <= start_time, Screening.end_time >= start_time),
            # existing one is running when the new one ends
            and_(Screening.start_time <= end_time, Screening.end_time >= end_time),
            # existing one sits inside the new interval
            and_(Screening.start_time >= start_time, Screening.end_time <= end_time),
        ),
    )
    if exclude_id is not None:
        query = query.filter(Screening.id != exclude_id)
    return query.order_by(Screening.start_time).first()


def ensure_hall_free(
    db: Session,
    hall_id: UUID,
    start_time: datetime,
    end_time: datetime,
    exclude_id: Optional[UUID] = None,
) -> None:
    if end_time <= start_time:
        raise InvalidInputError(END_BEFORE_START)
    clash = find_overlapping_screening(db, hall_id, start_time, end_time, exclude_id)
    if clash is not None:
        logger.info(
            "Hall %s busy: %s..%s clashes with screening %s",
            hall_id, start_time, end_time, clash.id,
        )
        raise ConflictError(HALL_BUSY)
