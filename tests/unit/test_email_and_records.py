import json
from datetime import datetime, timezone

import pytest

from app.domain.entities import LogRecord, Submission
from app.domain.services import (
    compose_enquiry_email,
    record_to_audit_line,
    record_to_json_line,
)


def test_compose_email_fields():
    s = Submission(name="Ann", email="ann@x.com", message="line one\nline two")
    email = compose_enquiry_email(s, sender="no-reply@site.com", recipient="me@site.com")

    assert email.to == "me@site.com"
    assert email.sender == "no-reply@site.com"
    assert email.reply_to == "ann@x.com"
    assert email.subject == "Contact form message from Ann"
    assert email.text == "You received a message from Ann <ann@x.com>:\n\nline one\nline two"
    assert "<div>line one<br/>line two</div>" in email.html
    assert "Ann &lt;ann@x.com&gt;" in email.html


def test_compose_email_escapes_html_before_line_breaks():
    s = Submission(
        name="<b>Eve</b>",
        email="eve@x.com",
        message='<script>alert("x")</script>\r\nbye',
    )
    email = compose_enquiry_email(s, sender="a@b.com", recipient="c@d.com")

    assert "<script>" not in email.html
    assert "<b>Eve</b>" not in email.html
    assert "&lt;script&gt;alert(&quot;x&quot;)&lt;/script&gt;<br/>bye" in email.html
    assert "&lt;b&gt;Eve&lt;/b&gt;" in email.html
    # plain text stays as typed
    assert "<script>" in email.text


def test_json_line(sample_record):
    line = record_to_json_line(sample_record)
    assert line.endswith("\n")
    assert line.count("\n") == 1

    data = json.loads(line)
    assert data == {
        "name": "Ann",
        "email": "ann@x.com",
        "message": "Hi\nthere",
        "receivedAt": "2024-05-01T12:30:00+00:00",
        "source": "website",
        "ip": "203.0.113.7",
    }


def test_json_line_omits_optional_fields():
    record = LogRecord(
        submission=Submission(name="Ann", email="ann@x.com", message="Hi"),
        received_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )
    data = json.loads(record_to_json_line(record))
    assert set(data) == {"name", "email", "message", "receivedAt"}


def test_audit_line(sample_record):
    assert (
        record_to_audit_line(sample_record)
        == "2024-05-01T12:30:00+00:00 | ann@x.com | Ann | 203.0.113.7\n"
    )


def test_audit_line_stays_on_one_line():
    record = LogRecord(
        submission=Submission(name="Ann\nBob", email="ann@x.com", message="Hi"),
        received_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )
    line = record_to_audit_line(record)
    assert line.count("\n") == 1
    assert "Ann Bob" in line
    assert line.rstrip("\n").endswith("| unknown")


def test_audit_line_escapes_field_separator():
    record = LogRecord(
        submission=Submission(name="A | evil@x.com", email="ann@x.com", message="Hi"),
        received_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        client_ip="203.0.113.7",
    )
    fields = record_to_audit_line(record).rstrip("\n").split(" | ")

    assert len(fields) == 4
    assert fields[2] == "A \\| evil@x.com"
    assert fields[3] == "203.0.113.7"


def test_naive_timestamp_is_rejected():
    with pytest.raises(ValueError):
        LogRecord(
            submission=Submission(name="Ann", email="ann@x.com", message="Hi"),
            received_at=datetime(2024, 5, 1),
        )
