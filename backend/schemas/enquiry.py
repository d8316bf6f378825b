# schemas/enquiry.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from utils.clock import as_utc
from utils.pagination import PaginationInfo


# Public submission payload; required fields are checked by the route
class EnquiryCreate(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: str = ""
    company_name: str = ""
    enquiry_type: str = ""
    message: str = ""

    @field_validator("first_name", "last_name", "email", "phone_number",
                     "company_name", "enquiry_type", "message", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    def missing_required(self) -> bool:
        return not (self.first_name.strip() and self.last_name.strip()
                    and self.email.strip() and self.message.strip())


class EnquiryOut(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone_number: str
    company_name: str
    enquiry_type: str
    message: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class EnquirySubmitted(BaseModel):
    enquiry_id: str
    submitted_at: datetime


# Filters echoed back to the caller; date_applied is False when the date was ignored
class EnquiryFilters(BaseModel):
    enquiry_type: Optional[str] = None
    date: Optional[str] = None
    date_applied: bool = False


class EnquiryListResponse(BaseModel):
    enquiries: List[EnquiryOut]
    pagination: PaginationInfo
    filters: EnquiryFilters
