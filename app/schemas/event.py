from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class EventCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field("", max_length=5000)
    location: Optional[str] = Field(None, max_length=200)
    start_date: datetime
    end_date: datetime
    max_participants: Optional[int] = Field(None, gt=0)


class EventResponse(BaseModel):
    id: str
    title: str
    description: str
    location: Optional[str] = None
    start_date: datetime
    end_date: datetime
    max_participants: Optional[int] = None
    status: str


class PaginationMetadata(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class EventListResponse(BaseModel):
    data: List[EventResponse]
    pagination: PaginationMetadata
