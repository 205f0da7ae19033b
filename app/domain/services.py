# app/domain/services.py
from __future__ import annotations

import html
import json
from typing import Any, Mapping

from email_validator import EmailNotValidError, validate_email

from app.domain.entities import EnquiryEmail, LogRecord, Submission, ValidationLimits
from app.domain.errors import SubmissionInvalid


def clean_field(value: Any) -> str:
    """Coerce a raw form value to a trimmed string ('' for None)."""
    if value is None:
        return ""
    return str(value).strip()


def is_valid_email(address: str) -> bool:
    """Syntax-only check; no DNS/deliverability lookup."""
    try:
        validate_email(address, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_submission(
    raw: Mapping[str, Any],
    limits: ValidationLimits = ValidationLimits(),
    *,
    default_source: str | None = None,
) -> Submission:
    """
    Build a Submission from raw request fields.

    Every problem is collected before raising, so the caller can report
    all of them at once.
    """
    name = clean_field(raw.get("name"))
    email = clean_field(raw.get("email"))
    message = clean_field(raw.get("message"))
    source = clean_field(raw.get("source")) or default_source

    errors: list[str] = []

    if not name:
        errors.append("Name is required")
    elif len(name) > limits.max_name_length:
        errors.append(f"Name must be at most {limits.max_name_length} characters")

    if not email:
        errors.append("Valid email is required")
    elif limits.strict_email and not is_valid_email(email):
        errors.append("Valid email is required")

    if not message:
        errors.append("Message is required")
    elif limits.max_message_length and len(message) > limits.max_message_length:
        errors.append(
            f"Message must be at most {limits.max_message_length} characters"
        )

    if source and len(source) > limits.max_source_length:
        errors.append(
            f"Source must be at most {limits.max_source_length} characters"
        )

    if errors:
        raise SubmissionInvalid(errors)

    return Submission(name=name, email=email, message=message, source=source)


def _html_block(text: str) -> str:
    # escape first, then turn newlines into breaks
    return html.escape(text).replace("\r\n", "\n").replace("\n", "<br/>")


def compose_enquiry_email(
    submission: Submission, *, sender: str, recipient: str
) -> EnquiryEmail:
    name, email, message = submission.name, submission.email, submission.message
    text = f"You received a message from {name} <{email}>:\n\n{message}"
    body_html = (
        f"<p><strong>From:</strong> {html.escape(name)} "
        f"&lt;{html.escape(email)}&gt;</p>"
        "<hr/>"
        f"<div>{_html_block(message)}</div>"
    )
    return EnquiryEmail(
        to=recipient,
        sender=sender,
        subject=f"Contact form message from {name}",
        text=text,
        html=body_html,
        reply_to=email,
    )


def record_to_json_line(record: LogRecord) -> str:
    s = record.submission
    payload: dict[str, Any] = {
        "name": s.name,
        "email": s.email,
        "message": s.message,
        "receivedAt": record.received_at.isoformat(),
    }
    if s.source:
        payload["source"] = s.source
    if record.client_ip:
        payload["ip"] = record.client_ip
    return json.dumps(payload, ensure_ascii=False) + "\n"


def _audit_field(text: str) -> str:
    # one line per record, and "|" stays a field separator
    text = text.replace("\\", "\\\\").replace("|", "\\|")
    return " ".join(text.splitlines())


def record_to_audit_line(record: LogRecord) -> str:
    s = record.submission
    return (
        f"{record.received_at.isoformat()} | {_audit_field(s.email)} | "
        f"{_audit_field(s.name)} | {record.client_ip or 'unknown'}\n"
    )
