import re
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from uuid import UUID
from linktrend.modules.transactions.models import PaymentMethod, TransactionStatus

# Bangladeshi mobile number: 01 + operator digit 3-9 + 8 digits
MOBILE_NUMBER_RE = re.compile(r"^01[3-9]\d{8}$")

def is_valid_mobile_number(value: str) -> bool:
    return bool(MOBILE_NUMBER_RE.match(value or ""))

class TransactionCreate(BaseModel):
    video_id: UUID
    user_id: UUID
    amount: float = Field(..., ge=0)
    method: PaymentMethod
    mobile_number: str
    trx_id: str = Field(..., min_length=1)

    @field_validator("mobile_number")
    @classmethod
    def check_mobile_number(cls, v: str) -> str:
        v = v.strip()
        if not is_valid_mobile_number(v):
            raise ValueError("Invalid Bangladeshi mobile number")
        return v

    @field_validator("trx_id")
    @classmethod
    def strip_trx_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Transaction ID is required")
        return v

class TransactionRead(BaseModel):
    id: UUID
    video_id: UUID
    user_id: UUID
    amount: float
    method: PaymentMethod
    mobile_number: str
    trx_id: str
    status: TransactionStatus
    created_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[UUID] = None

    class Config:
        from_attributes = True
