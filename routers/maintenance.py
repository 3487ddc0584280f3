# routers/maintenance.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from supabase import Client

from dependencies.auth import get_client, get_current_principal, require_admin, require_tenant
from models.enums import RequestStatus
from models.maintenance_request import MaintenanceRequestCreate, MaintenanceRequestRead
from models.principal import Principal
from services import maintenance


router = APIRouter(
    prefix="/maintenance",
    tags=["Maintenance"],
)


@router.get("/requests", response_model=List[MaintenanceRequestRead])
def list_requests(
    status: Optional[RequestStatus] = Query(None, description="Filter by status (open, resolved)"),
    principal: Principal = Depends(get_current_principal),
    client: Client = Depends(get_client),
):
    return maintenance.list_requests(client, principal, status)


@router.post("/requests", response_model=MaintenanceRequestRead, status_code=status.HTTP_201_CREATED)
def submit_request(
    payload: MaintenanceRequestCreate,
    principal: Principal = Depends(require_tenant),
    client: Client = Depends(get_client),
):
    return maintenance.submit_request(client, principal, payload)


@router.post("/requests/{request_id}/resolve", response_model=MaintenanceRequestRead)
def resolve_request(
    request_id: UUID,
    principal: Principal = Depends(require_admin),
    client: Client = Depends(get_client),
):
    return maintenance.resolve_request(client, principal, str(request_id))
