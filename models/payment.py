from sqlalchemy import Column, DateTime, Float, ForeignKey, String, func

from database import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(64), primary_key=True, index=True)
    submission_id = Column(String(64), ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(16), nullable=False, default="payment")
    provider_reference = Column(String(255), nullable=True, index=True)
    amount = Column(Float, nullable=False)
    currency = Column(String(8), nullable=False)
    status = Column(String(32), nullable=False, default="succeeded")
    receipt_url = Column(String(1024), nullable=True)
    invoice_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
