# routers/tenants.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from supabase import Client

from dependencies.auth import get_client, get_current_principal, require_admin
from models.principal import Principal
from models.provisioning import ProvisioningReport
from models.tenant import TenantProvision, TenantRead, TenantUpdate
from services import provisioning, tenant_directory


router = APIRouter(
    prefix="/tenants",
    tags=["Tenants"],
)


# -------------------------------------------------------------
# LIST
# -------------------------------------------------------------
@router.get("", response_model=List[TenantRead])
def list_tenants(
    principal: Principal = Depends(get_current_principal),
    client: Client = Depends(get_client),
):
    return tenant_directory.list_tenants(client, principal)


@router.get("/me", response_model=TenantRead)
def read_own_tenant(
    principal: Principal = Depends(get_current_principal),
    client: Client = Depends(get_client),
):
    return tenant_directory.get_own_tenant(client, principal)


# -------------------------------------------------------------
# PROVISIONING RECONCILIATION (admin)
# -------------------------------------------------------------
@router.get("/provisioning/orphans", response_model=ProvisioningReport)
def list_orphaned_principals(
    principal: Principal = Depends(require_admin),
    client: Client = Depends(get_client),
):
    return provisioning.find_orphaned_principals(client, principal)


@router.delete("/provisioning/orphans/{principal_id}")
def remove_orphaned_principal(
    principal_id: UUID,
    principal: Principal = Depends(require_admin),
    client: Client = Depends(get_client),
):
    return provisioning.remove_orphaned_principal(client, principal, str(principal_id))


# -------------------------------------------------------------
# GET ONE
# -------------------------------------------------------------
@router.get("/{tenant_id}", response_model=TenantRead)
def get_tenant(
    tenant_id: UUID,
    principal: Principal = Depends(get_current_principal),
    client: Client = Depends(get_client),
):
    return tenant_directory.get_tenant(client, principal, str(tenant_id))


# -------------------------------------------------------------
# PROVISION (login + profile + role)
# -------------------------------------------------------------
@router.post("", response_model=TenantRead, status_code=status.HTTP_201_CREATED)
def provision_tenant(
    payload: TenantProvision,
    principal: Principal = Depends(require_admin),
    client: Client = Depends(get_client),
):
    return provisioning.provision_tenant(client, principal, payload)


# -------------------------------------------------------------
# UPDATE / DELETE (admin)
# -------------------------------------------------------------
@router.patch("/{tenant_id}", response_model=TenantRead)
def update_tenant(
    tenant_id: UUID,
    payload: TenantUpdate,
    principal: Principal = Depends(require_admin),
    client: Client = Depends(get_client),
):
    return tenant_directory.update_tenant(client, principal, str(tenant_id), payload)


@router.delete("/{tenant_id}")
def delete_tenant(
    tenant_id: UUID,
    principal: Principal = Depends(require_admin),
    client: Client = Depends(get_client),
):
    removed = tenant_directory.delete_tenant(client, principal, str(tenant_id))
    return {"success": True, "id": str(removed["id"])}
