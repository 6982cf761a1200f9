from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field


class ProjectCreate(BaseModel):
    name: str = Field(min_length=3)
    location: str = Field(min_length=2)
    hourly_rate: Decimal = Field(ge=0)


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    location: str
    hourly_rate: float
    total_hours: float = 0
