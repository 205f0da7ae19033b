from datetime import datetime, timezone
from typing import Annotated, Optional, Sequence

from fastapi import APIRouter, Depends, Request

from app.application.submit_enquiry import submit_enquiry
from app.domain.entities import ValidationLimits
from app.domain.ports.email_port import EmailPort
from app.domain.ports.submission_log import SubmissionLogPort
from app.presentation.dependencies import (
    enforce_rate_limit,
    get_app_settings,
    get_client_ip,
    get_email_port,
    get_submission_logs,
    get_validation_limits,
)
from app.presentation.request_body import read_submission_fields
from app.schemas.responses import ErrorOut, SubmitOut, ValidationErrorsOut
from app.settings import Settings

router = APIRouter(tags=["Enquiries"], dependencies=[Depends(enforce_rate_limit)])

_responses = {
    400: {"model": ValidationErrorsOut},
    413: {"model": ErrorOut},
    429: {"model": ErrorOut},
    500: {"model": ErrorOut},
    502: {"model": ErrorOut},
}


@router.post("/send", response_model=SubmitOut, responses=_responses)
@router.post("/api/enquiry", response_model=SubmitOut, responses=_responses)
async def post_enquiry(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
    limits: Annotated[ValidationLimits, Depends(get_validation_limits)],
    email_port: Annotated[Optional[EmailPort], Depends(get_email_port)],
    logs: Annotated[Sequence[SubmissionLogPort], Depends(get_submission_logs)],
    client_ip: Annotated[str, Depends(get_client_ip)],
):
    received_at = datetime.now(timezone.utc)
    raw = await read_submission_fields(request, settings.max_body_bytes)

    result = await submit_enquiry(
        raw=raw,
        email_port=email_port,
        logs=logs,
        sender=settings.from_email,
        recipient=settings.contact_receiver,
        limits=limits,
        dispatch_policy=settings.dispatch_policy,
        require_email_provider=settings.require_email_provider,
        default_source=settings.submission_source,
        client_ip=client_ip,
        received_at=received_at,
    )

    if result.dispatched:
        return SubmitOut(message="Message sent successfully.")
    return SubmitOut(message="Message received.")
