from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Submission:
    name: str
    email: str
    message: str
    source: Optional[str] = None


@dataclass(frozen=True)
class LogRecord:
    submission: Submission
    received_at: datetime
    client_ip: Optional[str] = None

    def __post_init__(self):
        if self.received_at.tzinfo is None:
            raise ValueError("received_at must be timezone-aware")


@dataclass(frozen=True)
class EnquiryEmail:
    to: str
    sender: str
    subject: str
    text: str
    html: str
    reply_to: Optional[str] = None


@dataclass(frozen=True)
class ValidationLimits:
    max_name_length: int = 100
    max_message_length: int = 5000  # 0 means unbounded
    max_source_length: int = 100
    strict_email: bool = True


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after: int  # seconds until the current window ends
