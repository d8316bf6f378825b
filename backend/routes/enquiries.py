# backend/routes/enquiries.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_db
from models.enquiry import Enquiry
from schemas.enquiry import EnquiryCreate, EnquiryOut, EnquirySubmitted
from schemas.response import success_response
from utils.auth import AuthenticatedRequest, admin_or_super_admin
from utils.clock import as_utc, utcnow
from utils.enquiry_query import get_enquiry, list_enquiries
from utils.errors import NotFound, ValidationError
from utils.validation import is_valid_email, require_json

router = APIRouter(tags=["Enquiries"])
logger = logging.getLogger(__name__)


# Lenient integer parsing: anything unusable falls back to the default
def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None


# Submit a new enquiry (public)
@router.post("/enquiry", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_json)])
def create_enquiry(payload: EnquiryCreate, db: Session = Depends(get_db)):
    if payload.missing_required():
        raise ValidationError("Missing required fields", "first_name, last_name, email, and message are required")
    if not is_valid_email(payload.email):
        raise ValidationError("Invalid email format", "Email must contain @ and domain")

    now = utcnow()
    enquiry = Enquiry(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        phone_number=payload.phone_number,
        company_name=payload.company_name,
        enquiry_type=payload.enquiry_type,
        message=payload.message,
        created_at=now,
        updated_at=now,
    )
    db.add(enquiry)
    db.commit()
    db.refresh(enquiry)

    logger.info("Enquiry %s submitted (type=%r)", enquiry.id, enquiry.enquiry_type)
    return success_response(
        status.HTTP_201_CREATED,
        "Enquiry submitted successfully. We will get back to you soon.",
        EnquirySubmitted(enquiry_id=enquiry.id, submitted_at=as_utc(enquiry.created_at)),
    )


# List enquiries newest first with pagination and type/date filters
@router.get("/enquiries")
def get_enquiries(
    page: Optional[str] = Query(None, description="Page number (1-based)"),
    limit: Optional[str] = Query(None, description="Items per page (max 100)"),
    enquiry_type: Optional[str] = Query(None, description="Exact enquiry type"),
    date: Optional[str] = Query(None, description="Creation date (YYYY-MM-DD, UTC)"),
    db: Session = Depends(get_db),
    auth: AuthenticatedRequest = Depends(admin_or_super_admin),
):
    result = list_enquiries(db, _parse_int(page), _parse_int(limit), enquiry_type, date)
    return success_response(status.HTTP_200_OK, "Enquiries retrieved successfully", result)


# Retrieve a single enquiry; unknown and malformed ids are both 404
@router.get("/enquiries/{enquiry_id}")
def get_enquiry_by_id(
    enquiry_id: str,
    db: Session = Depends(get_db),
    auth: AuthenticatedRequest = Depends(admin_or_super_admin),
):
    enquiry = get_enquiry(db, enquiry_id)
    if enquiry is None:
        raise NotFound("Enquiry not found", "No enquiry found with the provided ID")
    return success_response(status.HTTP_200_OK, "Enquiry retrieved successfully",
                            EnquiryOut.model_validate(enquiry))
