from sqlalchemy import Column, Integer, String, Numeric

from timesheet_portal.database import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, unique=True)
    hourly_rate = Column(Numeric(10, 2), nullable=False)
    total_hours = Column(Numeric(10, 2), nullable=False, default=0)
    location = Column(String(200), nullable=False)
