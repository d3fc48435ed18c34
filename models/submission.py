from sqlalchemy import Column, DateTime, Float, Integer, String, Text, func
from sqlalchemy import JSON

from database import Base


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(String(64), primary_key=True, index=True)
    client_id = Column(String(64), nullable=True, index=True)
    status = Column(String(32), nullable=False, default="pending_payment", index=True)
    funnel_status = Column(String(64), nullable=True)
    email = Column(String(320), nullable=True)
    first_name = Column(String(128), nullable=True)
    last_name = Column(String(128), nullable=True)
    phone = Column(String(64), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(128), nullable=True)
    postal_code = Column(String(32), nullable=True)
    country = Column(String(64), nullable=True)
    total_price = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    # Full form snapshot (session id, services, documents, steps, payment)
    data = Column(JSON, nullable=False, default=dict)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __mapper_args__ = {"version_id_col": version}
