# models/maintenance_request.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from models.enums import RequestStatus


ISSUE_MIN_LENGTH = 10
ISSUE_MAX_LENGTH = 1000


class MaintenanceRequestCreate(BaseModel):
    issue_description: str = Field(..., min_length=ISSUE_MIN_LENGTH, max_length=ISSUE_MAX_LENGTH)


class MaintenanceRequestRead(BaseModel):
    id: str
    tenant_id: str
    room_no: str
    issue_description: str
    status: RequestStatus
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
