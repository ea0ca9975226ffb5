import json
import uuid
from collections.abc import Iterator
from typing import Any

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import StreamingResponse

from complyscan.accounts.models import Principal
from complyscan.api.dependencies import get_principal, get_services
from complyscan.api.schemas import AnalyzeFileRequest, AnalyzeTextRequest
from complyscan.api.services import Services
from complyscan.logging.logger import Log
from complyscan.ocr.sources import SUPPORTED_TYPES, to_data_url
from complyscan.pipeline.exceptions import FileTooLargeError, InputRejectedError

router = APIRouter(prefix="/api", tags=["Analyze"])


def ndjson(events: Iterator[dict[str, Any]]) -> Iterator[str]:
    for event in events:
        yield json.dumps(event) + "\n"


@router.post("/upload")
def upload_file(
    file: UploadFile | None = File(default=None),
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    """Validate an upload and hand it back as a data URL for ``/analyze``."""
    if file is None:
        raise InputRejectedError("No file provided")
    content_type = (file.content_type or "").lower()
    if content_type not in SUPPORTED_TYPES:
        raise InputRejectedError("Invalid file type. Allowed: PDF, PNG, JPG, WEBP, GIF")

    max_bytes = services.settings.max_upload_bytes
    data = file.file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise FileTooLargeError(
            f"File too large. Maximum size: {max_bytes // (1024 * 1024)}MB"
        )

    file_id = str(uuid.uuid4())
    Log.info(f"Accepted upload {file_id} ({content_type}, {len(data)} bytes) for {principal.user_id}")
    return {
        "success": True,
        "file": {
            "id": file_id,
            "name": file.filename or "",
            "url": to_data_url(data, content_type),
            "type": content_type,
            "size": len(data),
        },
    }


@router.post("/analyze")
def analyze_file(
    body: AnalyzeFileRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    outcome = services.orchestrator.analyze_file(
        principal,
        file_url=body.file_url,
        file_name=body.file_name,
        file_id=body.file_id,
    )
    return outcome.to_dict()


@router.put("/analyze")
def analyze_text(
    body: AnalyzeTextRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    outcome = services.orchestrator.analyze_text(
        principal, text=body.text, file_name=body.file_name
    )
    return outcome.to_dict()


@router.post("/analyze-stream")
def analyze_stream(
    body: AnalyzeFileRequest,
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> StreamingResponse:
    """NDJSON progress events followed by one ``complete`` or ``error`` event.

    Auth, input and quota failures are rejected with a status code before the
    stream starts.
    """
    context = services.orchestrator.prepare(
        principal,
        file_url=body.file_url,
        file_name=body.file_name,
        file_id=body.file_id,
    )
    return StreamingResponse(
        ndjson(services.orchestrator.stream(context)),
        media_type="application/x-ndjson",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
