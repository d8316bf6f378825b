from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON

from database import Base
from utils.clock import utcnow


# Audit trail of account events (user provisioning, sign-in attempts)
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)

    # Event timestamp and core action details
    ts = Column(DateTime(timezone=True), default=utcnow, index=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=True)
    action = Column(String(50), index=True)
    resource = Column(String(50), index=True)
    status = Column(String(20), index=True)
    ip = Column(String(64), nullable=True)

    # JSON container for flexible context data
    meta = Column(JSON, nullable=True)
