# backend/models/enquiry.py
from sqlalchemy import Column, DateTime, String, Text

from database import Base
from models.users import new_id
from utils.clock import utcnow


# A client-submitted enquiry; rows are inserted once and never updated or deleted
class Enquiry(Base):
    __tablename__ = "enquiries"

    id = Column(String(32), primary_key=True, default=new_id)

    # Submitter identity
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String(254), nullable=False, index=True)
    phone_number = Column(String, nullable=False, default="")
    company_name = Column(String, nullable=False, default="")

    enquiry_type = Column(String, nullable=False, default="", index=True)
    message = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
