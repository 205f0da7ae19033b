import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.presentation.dependencies import get_email_port
from app.settings import Settings


@pytest.fixture()
def settings_factory(tmp_path):
    def _make(**overrides) -> Settings:
        values = dict(
            sendgrid_api_key=None,
            submission_log_path=str(tmp_path / "data" / "submissions.jsonl"),
            audit_log_path=str(tmp_path / "contact_logs.txt"),
            rate_limit_max=6,
            rate_limit_window_seconds=900,
        )
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


_UNSET = object()


@pytest.fixture()
def make_client(settings_factory):
    """
    Build an app with a fresh rate limiter and file logs under tmp_path.
    Pass `email_port` to override the adapter built by the lifespan, or
    `http_transport` to keep the real adapter off the network.
    """
    clients: list[TestClient] = []

    def _make(email_port=_UNSET, http_transport=None, **overrides):
        app = create_app(settings_factory(**overrides), http_transport=http_transport)
        if email_port is not _UNSET:
            app.dependency_overrides[get_email_port] = lambda: email_port
        client = TestClient(app, raise_server_exceptions=False)
        client.__enter__()  # run the lifespan
        clients.append(client)
        return client

    try:
        yield _make
    finally:
        for client in clients:
            client.app.dependency_overrides.clear()
            client.__exit__(None, None, None)


@pytest.fixture()
def jsonl_lines(tmp_path):
    def _read() -> list[str]:
        path = tmp_path / "data" / "submissions.jsonl"
        if not path.exists():
            return []
        return path.read_text(encoding="utf-8").splitlines()

    return _read
