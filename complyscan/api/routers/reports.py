import base64
from typing import Any

from fastapi import APIRouter, Depends, Response

from complyscan.accounts.models import Principal
from complyscan.api.dependencies import get_principal, get_services
from complyscan.api.schemas import GeneratePdfRequest
from complyscan.api.services import Services
from complyscan.pipeline.exceptions import InputRejectedError
from complyscan.reporting.pdf_report import report_file_name
from complyscan.storage.exceptions import ReportNotFoundError
from complyscan.storage.models import Report

router = APIRouter(prefix="/api", tags=["Reports"])


def find_report(services: Services, report_id: str, principal: Principal) -> Report:
    report = services.store.get_one(report_id, principal.user_id)
    if report is None:
        raise ReportNotFoundError("Report not found")
    return report


@router.get("/reports")
def list_reports(
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    reports = services.store.get_all(principal.user_id)
    return {"success": True, "reports": [report.to_dict() for report in reports]}


@router.get("/report/{report_id}")
def get_report(
    report_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    return {"success": True, "report": find_report(services, report_id, principal).to_dict()}


@router.get("/report/{report_id}/pdf")
def download_report_pdf(
    report_id: str,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> Response:
    report = find_report(services, report_id, principal)
    pdf = services.renderer.render(
        report.analysis,
        file_name=report.file_name,
        branding=services.accounts.get_branding(principal),
    )
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{report_file_name(report.file_name)}"'
        },
    )


@router.post("/generate-pdf")
def generate_pdf(
    body: GeneratePdfRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    """Render a posted analysis without touching the report stores."""
    if not body.analysis:
        raise InputRejectedError("Analysis data required")
    pdf = services.renderer.render(
        body.analysis,
        file_name=body.file_name,
        branding=services.accounts.get_branding(principal),
    )
    return {
        "success": True,
        "pdf": base64.b64encode(pdf).decode("ascii"),
        "fileName": report_file_name(body.file_name),
    }
