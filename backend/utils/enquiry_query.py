# utils/enquiry_query.py
"""
Filtered, paginated reads over the enquiry collection.

Results are always ordered newest first. A ``date`` that is not a valid
``YYYY-MM-DD`` calendar date is dropped rather than rejected; the response
reports this through ``filters.date_applied``.
"""
import logging
from datetime import datetime, time, timezone
from typing import Optional, Tuple

from sqlalchemy.orm import Query, Session

from models.enquiry import Enquiry
from schemas.enquiry import EnquiryFilters, EnquiryListResponse, EnquiryOut
from utils.pagination import PaginationInfo, normalize_limit, normalize_page, offset_for

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def parse_date_filter(date: Optional[str]) -> Optional[Tuple[datetime, datetime]]:
    """Return the inclusive UTC bounds of the given calendar day, or None."""
    if not date:
        return None
    try:
        day = datetime.strptime(date, DATE_FORMAT).date()
    except ValueError:
        logger.debug("Ignoring unparsable date filter %r", date)
        return None

    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    end = datetime.combine(day, time.max, tzinfo=timezone.utc)
    return start, end


def build_enquiry_query(db: Session, enquiry_type: Optional[str] = None,
                        day_bounds: Optional[Tuple[datetime, datetime]] = None) -> Query:
    query = db.query(Enquiry)

    if enquiry_type:
        query = query.filter(Enquiry.enquiry_type == enquiry_type)

    if day_bounds is not None:
        start, end = day_bounds
        query = query.filter(Enquiry.created_at >= start, Enquiry.created_at <= end)

    logger.debug("Enquiry filter: enquiry_type=%r day_bounds=%r", enquiry_type, day_bounds)
    return query


def list_enquiries(db: Session, page: Optional[int] = None, limit: Optional[int] = None,
                   enquiry_type: Optional[str] = None, date: Optional[str] = None) -> EnquiryListResponse:
    page = normalize_page(page)
    limit = normalize_limit(limit)
    day_bounds = parse_date_filter(date)

    query = build_enquiry_query(db, enquiry_type, day_bounds)
    total = query.count()
    rows = (
        query.order_by(Enquiry.created_at.desc(), Enquiry.id.desc())
        .offset(offset_for(page, limit))
        .limit(limit)
        .all()
    )

    return EnquiryListResponse(
        enquiries=[EnquiryOut.model_validate(row) for row in rows],
        pagination=PaginationInfo.build(page, limit, total),
        filters=EnquiryFilters(
            enquiry_type=enquiry_type or None,
            date=date or None,
            date_applied=day_bounds is not None,
        ),
    )


def get_enquiry(db: Session, enquiry_id: str) -> Optional[Enquiry]:
    return db.query(Enquiry).filter(Enquiry.id == enquiry_id).first()
