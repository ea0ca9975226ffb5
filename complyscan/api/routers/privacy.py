import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Request

from complyscan.accounts.models import Principal
from complyscan.api.dependencies import client_ip, get_principal, get_services
from complyscan.api.schemas import PrivacyAgreementRequest
from complyscan.api.services import Services
from complyscan.logging.logger import Log
from complyscan.storage.models import PrivacyAgreement

router = APIRouter(prefix="/api", tags=["Privacy"])

AGREEMENT_TEXT = "Privacy Policy and Terms of Service - Comprehensive Legal Agreement"
AGREEMENT_VERSION = "2.0"


@router.get("/privacy-agreements")
def list_agreements(
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    agreements = services.store.get_agreements(principal.user_id)
    return {"agreements": [agreement.to_dict() for agreement in agreements]}


@router.post("/privacy-agreements")
def save_agreement(
    body: PrivacyAgreementRequest,
    request: Request,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    """Record an acceptance in both stores and mirror it into account metadata."""
    user_email = body.user_email or services.accounts.get_user(principal).primary_email
    agreement_date = body.agreement_date or datetime.now(timezone.utc).isoformat()
    agreement = PrivacyAgreement(
        id=f"agreement_{principal.user_id}_{int(time.time() * 1000)}",
        user_id=principal.user_id,
        user_email=user_email or "unknown",
        agreed=body.agreed,
        agreement_date=agreement_date,
        dont_show_again=body.dont_show_again,
        ip_address=body.ip_address or client_ip(request),
        user_agent=body.user_agent or request.headers.get("user-agent") or "unknown",
        agreement_text=AGREEMENT_TEXT,
        agreement_version=body.agreement_version or AGREEMENT_VERSION,
        created_at=agreement_date,
    )

    outcome = services.store.save_agreement(agreement)
    if not outcome.saved:
        Log.error(f"Privacy agreement {agreement.id} was not saved to any store")

    services.accounts.record_privacy_agreement(
        principal,
        agreement_id=agreement.id,
        agreed=agreement.agreed,
        agreement_date=agreement.agreement_date,
        dont_show_again=agreement.dont_show_again,
    )
    return {"success": True, "agreementId": agreement.id, "saved": outcome.saved}
