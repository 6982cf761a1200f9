from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, Text
from sqlalchemy.sql import func

from timesheet_portal.database import Base


# ---------------------------------------------------
# Enums
# ---------------------------------------------------

USER_ROLES = ("admin", "client", "candidate")
USER_TYPES = ("sole_trader", "business")
PAYMENT_FREQUENCIES = ("weekly", "fortnightly", "monthly")

USER_ROLE_ENUM = String(20)  # keep String to avoid enum migration issues


# ---------------------------------------------------
# User
# ---------------------------------------------------

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(USER_ROLE_ENUM, nullable=False, default="candidate")
    active = Column(Boolean, default=True, nullable=False)

    # Current rates. Timesheets snapshot these at creation time.
    normal_rate = Column(Numeric(10, 2), nullable=True)
    overtime_rate = Column(Numeric(10, 2), nullable=True)
    payment_frequency = Column(String(20), nullable=True)

    # Contractor profile
    email = Column(String(255), nullable=True)
    phone_number = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    nino = Column(String(20), nullable=True, unique=True)
    utr = Column(String(20), nullable=True, unique=True)
    user_type = Column(String(20), nullable=True)
    crn = Column(String(50), nullable=True)
    vat_number = Column(String(50), nullable=True)

    # Banking
    bank_name = Column(String(200), nullable=True)
    account_name = Column(String(200), nullable=True)
    account_number = Column(String(50), nullable=True)
    sort_code = Column(String(20), nullable=True)
    iban = Column(String(50), nullable=True)
    swift = Column(String(20), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
