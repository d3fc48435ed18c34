from sqlalchemy import Boolean, Column, DateTime, Float, String, Text, func

from database import Base


class Service(Base):
    __tablename__ = "services"

    service_id = Column(String(64), primary_key=True, index=True)
    name = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    # EUR price; currency-specific columns override conversion when set
    base_price = Column(Float, nullable=False, default=0)
    price_usd = Column(Float, nullable=True)
    price_gbp = Column(Float, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class ServiceOption(Base):
    __tablename__ = "service_options"

    option_id = Column(String(64), primary_key=True, index=True)
    name = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    additional_price = Column(Float, nullable=False, default=0)
    price_usd = Column(Float, nullable=True)
    price_gbp = Column(Float, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
