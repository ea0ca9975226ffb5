from typing import Any

from fastapi import APIRouter, Depends

from complyscan.accounts.models import Principal
from complyscan.api.dependencies import get_principal, get_services
from complyscan.api.schemas import BrandingRequest, SettingsRequest, SubscriptionUpdateRequest
from complyscan.api.services import Services

router = APIRouter(prefix="/api", tags=["Account"])


@router.get("/subscription")
def get_subscription(
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    return {"subscription": services.accounts.get_subscription(principal).to_dict()}


@router.post("/subscription")
def set_subscription(
    body: SubscriptionUpdateRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    return {"success": True, "tier": services.accounts.set_tier(principal, body.tier)}


@router.get("/api-keys")
def get_api_key(
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    return {"apiKey": services.accounts.get_api_key(principal)}


@router.post("/api-keys")
def generate_api_key(
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    return {"success": True, "apiKey": services.accounts.generate_api_key(principal)}


@router.delete("/api-keys")
def revoke_api_key(
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    services.accounts.revoke_api_key(principal)
    return {"success": True}


@router.get("/branding")
def get_branding(
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    return {"branding": services.accounts.get_branding(principal).to_dict()}


@router.post("/branding")
def save_branding(
    body: BrandingRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    branding = services.accounts.save_branding(
        principal,
        company_name=body.company_name,
        logo_url=body.logo_url,
        primary_color=body.primary_color,
    )
    return {"success": True, "branding": branding.to_dict()}


@router.get("/settings")
def get_settings(
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    return {"settings": services.accounts.get_settings(principal)}


@router.post("/settings")
def save_settings(
    body: SettingsRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    settings = services.accounts.save_settings(
        principal,
        digest=body.digest,
        alerts=body.alerts,
        locations=body.locations,
    )
    return {"success": True, "settings": settings}
