import uuid
import enum
from sqlalchemy import Column, String, Float, DateTime, Enum, Uuid
from linktrend.core.db import Base
from linktrend.modules.auth.models import utcnow

class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class PaymentMethod(str, enum.Enum):
    BKASH = "bkash"
    NAGAD = "nagad"
    ROCKET = "rocket"

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    video_id = Column(Uuid, nullable=False, index=True)
    user_id = Column(Uuid, nullable=False, index=True)

    amount = Column(Float, nullable=False)
    method = Column(Enum(PaymentMethod, values_callable=lambda e: [m.value for m in e]), nullable=False)
    mobile_number = Column(String, nullable=False)
    trx_id = Column(String, unique=True, index=True, nullable=False) # Payer's mobile-money reference

    status = Column(
        Enum(TransactionStatus, values_callable=lambda e: [m.value for m in e]),
        default=TransactionStatus.PENDING,
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(Uuid, nullable=True)
