from datetime import datetime, timezone

import pytest

from app.domain.entities import LogRecord, Submission
from tests.fakes import (
    FakeEmailFailing,
    FakeEmailOK,
    FakeErroredSubmissionLog,
    FakeSubmissionLog,
)


@pytest.fixture()
def email_ok():
    return FakeEmailOK()


@pytest.fixture()
def email_failing():
    return FakeEmailFailing()


@pytest.fixture()
def submission_log():
    return FakeSubmissionLog()


@pytest.fixture()
def errored_log():
    return FakeErroredSubmissionLog()


@pytest.fixture()
def valid_payload():
    return {"name": "Ann", "email": "ann@x.com", "message": "Hi"}


@pytest.fixture()
def sample_record():
    return LogRecord(
        submission=Submission(
            name="Ann", email="ann@x.com", message="Hi\nthere", source="website"
        ),
        received_at=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        client_ip="203.0.113.7",
    )
