from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional
from datetime import datetime

Role = Literal["admin", "client", "candidate"]
UserType = Literal["sole_trader", "business"]
PaymentFrequency = Literal["weekly", "fortnightly", "monthly"]


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    nino: Optional[str] = None
    utr: Optional[str] = None
    user_type: Optional[UserType] = None
    crn: Optional[str] = None
    vat_number: Optional[str] = None
    bank_name: Optional[str] = None
    account_name: Optional[str] = None
    account_number: Optional[str] = None
    sort_code: Optional[str] = None
    iban: Optional[str] = None
    swift: Optional[str] = None


class UserUpdate(ProfileUpdate):
    """Admin-side update: profile plus role, rates and billing cadence."""
    username: Optional[str] = Field(default=None, min_length=3)
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[Role] = None
    active: Optional[bool] = None
    normal_rate: Optional[Decimal] = Field(default=None, ge=0)
    overtime_rate: Optional[Decimal] = Field(default=None, ge=0)
    payment_frequency: Optional[PaymentFrequency] = None


class UserCreate(UserUpdate):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    role: Role = "candidate"


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str


class UserResponse(UserSummary):
    active: bool
    normal_rate: Optional[float] = None
    overtime_rate: Optional[float] = None
    payment_frequency: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    nino: Optional[str] = None
    utr: Optional[str] = None
    user_type: Optional[str] = None
    crn: Optional[str] = None
    vat_number: Optional[str] = None
    bank_name: Optional[str] = None
    account_name: Optional[str] = None
    account_number: Optional[str] = None
    sort_code: Optional[str] = None
    iban: Optional[str] = None
    swift: Optional[str] = None
    created_at: Optional[datetime] = None
