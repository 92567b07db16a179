"""FastAPI surface for the container inspection review backend."""

from __future__ import annotations

import io
import threading
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Form, Header, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, StreamingResponse

from inspection_backend.models.inspection import Inspection, Principal, ReviewStatus, Role
from inspection_backend.service import ReviewService
from inspection_backend.utils.config import Config
from inspection_backend.utils.errors import ErrorType, InspectionReviewError
from inspection_backend.utils.logging import setup_logging_from_config

load_dotenv()

APP_TITLE = "Container Inspection Review"

STATUS_CODES = {
    ErrorType.INSPECTION_NOT_FOUND: 404,
    ErrorType.DEFECT_NOT_FOUND: 404,
    ErrorType.QUOTE_MISSING: 409,
    ErrorType.INVALID_TRANSITION: 409,
    ErrorType.QUOTE_FROZEN: 409,
    ErrorType.CUSTOMER_DETAILS_MISSING: 409,
    ErrorType.INVOICE_SEQUENCE_INVALID: 409,
    ErrorType.INVALID_COST: 422,
    ErrorType.UNAUTHORIZED: 403,
}

app = FastAPI(title=APP_TITLE)

_service: Optional[ReviewService] = None
_service_lock = threading.Lock()


def get_service() -> ReviewService:
    """Build the service from config.yaml on first use."""
    global _service
    with _service_lock:
        if _service is None:
            config = Config.load()
            setup_logging_from_config(config.logging)
            _service = ReviewService.from_config(config)
    return _service


def get_principal(
    x_user_name: str = Header(default="anonymous"),
    x_user_role: str = Header(default=Role.VIEWER.value),
) -> Principal:
    try:
        role = Role(x_user_role.upper())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown role '{x_user_role}'.")
    return Principal(name=x_user_name, role=role)


def _inspection_payload(inspection: Inspection) -> Dict[str, Any]:
    return jsonable_encoder(inspection.to_dict())


@app.exception_handler(InspectionReviewError)
async def review_error_handler(request: Request, exc: InspectionReviewError) -> JSONResponse:
    status_code = STATUS_CODES.get(exc.error_type, 400)
    return JSONResponse(status_code=status_code, content={"error": exc.to_dict()})


def _pdf_response(data: bytes, filename: str) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(data),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/api/inspections/{inspection_id}")
def get_inspection(inspection_id: str, service: ReviewService = Depends(get_service)) -> JSONResponse:
    inspection = service.open_review(inspection_id)
    return JSONResponse(_inspection_payload(inspection))


@app.post("/api/inspections/{inspection_id}/defects/{defect_id}/status")
def update_defect_status(
    inspection_id: str,
    defect_id: str,
    status: str = Form(...),
    principal: Principal = Depends(get_principal),
    service: ReviewService = Depends(get_service),
) -> JSONResponse:
    try:
        review_status = ReviewStatus(status.upper())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown review status '{status}'.")
    inspection = service.review_defect(inspection_id, defect_id, review_status, principal)
    return JSONResponse(_inspection_payload(inspection))


@app.post("/api/inspections/{inspection_id}/defects/{defect_id}/cost")
def update_defect_cost(
    inspection_id: str,
    defect_id: str,
    amount: str = Form(...),
    principal: Principal = Depends(get_principal),
    service: ReviewService = Depends(get_service),
) -> JSONResponse:
    inspection = service.edit_repair_cost(inspection_id, defect_id, amount, principal)
    return JSONResponse(_inspection_payload(inspection))


@app.post("/api/inspections/{inspection_id}/quote/approve")
def approve_quote(
    inspection_id: str,
    principal: Principal = Depends(get_principal),
    service: ReviewService = Depends(get_service),
) -> JSONResponse:
    inspection = service.approve_quote(inspection_id, principal)
    return JSONResponse(_inspection_payload(inspection))


@app.post("/api/inspections/{inspection_id}/invoice")
def create_invoice(
    inspection_id: str,
    customer_name: str = Form(default=""),
    customer_address: str = Form(default=""),
    principal: Principal = Depends(get_principal),
    service: ReviewService = Depends(get_service),
) -> JSONResponse:
    inspection = service.create_invoice(inspection_id, principal, customer_name, customer_address)
    return JSONResponse(_inspection_payload(inspection), status_code=201)


@app.get("/api/inspections/{inspection_id}/invoice.pdf")
def download_invoice(
    inspection_id: str,
    lang: Optional[str] = None,
    service: ReviewService = Depends(get_service),
) -> StreamingResponse:
    document = service.invoice_document(inspection_id, lang)
    return _pdf_response(service.renderer.render_bytes(document), document.filename)


@app.get("/api/inspections/{inspection_id}/report.pdf")
def download_report(
    inspection_id: str,
    lang: Optional[str] = None,
    service: ReviewService = Depends(get_service),
) -> StreamingResponse:
    document = service.report_document(inspection_id, lang)
    return _pdf_response(service.renderer.render_bytes(document), document.filename)


@app.get("/api/manifest/next")
def next_container(service: ReviewService = Depends(get_service)) -> Dict[str, Optional[str]]:
    return {"container_number": service.next_pending_container()}


@app.get("/healthz")
async def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}
