"""
Tests for the intake extraction client and tracker configuration.
"""

import base64
import json

import httpx
import pytest

from foia_deadlines.config import (
    DEFAULT_DB_URL,
    ENV_DB_URL,
    ENV_INTAKE_TOKEN,
    ENV_INTAKE_URL,
    IntakeSettings,
    load_settings,
)
from foia_deadlines.engine.record import Department
from foia_deadlines.intake.client import IntakeClient, IntakeResult


# ---------------------------------------------------------------------------
# Intake client
# ---------------------------------------------------------------------------

class TestIntakeResult:
    def test_from_api_normalizes_dates(self):
        result = IntakeResult.from_api({
            "request_number": " AB001T0001234 ",
            "requester_name": "Jane Doe",
            "intake_date": "2025-01-06",
            "initial_due_date": "3/2/2025",
        })
        assert result.request_number == "AB001T0001234"
        assert result.intake_date == "06/01/2025"
        assert result.initial_due_date == "03/02/2025"

    def test_missing_due_date_is_empty(self):
        result = IntakeResult.from_api({"request_number": "N1", "intake_date": "06/01/2025"})
        assert result.initial_due_date == ""
        assert result.requester_name == ""

    @pytest.mark.parametrize("data", [
        {"intake_date": "06/01/2025"},
        {"request_number": "N1"},
        {"request_number": "N1", "intake_date": "yesterday"},
        {"request_number": "N1", "intake_date": "06/01/2025", "initial_due_date": "31/02/2025"},
    ])
    def test_invalid_responses(self, data):
        with pytest.raises(ValueError):
            IntakeResult.from_api(data)


class TestIntakeClient:
    def _client(self, handler, token="secret"):
        settings = IntakeSettings(base_url="https://intake.example", api_token=token)
        return IntakeClient(settings, transport=httpx.MockTransport(handler))

    def test_requires_base_url(self):
        with pytest.raises(ValueError, match="not configured"):
            IntakeClient(IntakeSettings())

    def test_extract(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "request_number": "AB001T0001234",
                "requester_name": "Jane Doe",
                "intake_date": "06/01/2025",
                "initial_due_date": "03/02/2025",
            })

        with self._client(handler) as client:
            result = client.extract(b"%PDF-1.4", filename="form.pdf")

        assert result.request_number == "AB001T0001234"
        assert seen["path"] == "/extract"
        assert seen["auth"] == "Bearer secret"
        assert seen["body"]["filename"] == "form.pdf"
        encoded = seen["body"]["document"].split(",", 1)[1]
        assert base64.b64decode(encoded) == b"%PDF-1.4"

    def test_extract_file(self, tmp_path):
        path = tmp_path / "request.pdf"
        path.write_bytes(b"data")

        def handler(request: httpx.Request) -> httpx.Response:
            assert json.loads(request.content)["filename"] == "request.pdf"
            return httpx.Response(200, json={"request_number": "N1", "intake_date": "06/01/2025"})

        with self._client(handler, token="") as client:
            assert client.extract_file(path).request_number == "N1"

    def test_error_status_raises(self):
        with self._client(lambda request: httpx.Response(500)) as client:
            with pytest.raises(httpx.HTTPStatusError):
                client.extract(b"x")

    def test_incomplete_extraction_raises(self):
        with self._client(lambda request: httpx.Response(200, json={"request_number": "N1"})) as client:
            with pytest.raises(ValueError, match="intake_date"):
                client.extract(b"x")

    def test_check_health(self):
        with self._client(lambda request: httpx.Response(200)) as client:
            assert client.check_health() is True
        with self._client(lambda request: httpx.Response(503)) as client:
            assert client.check_health() is False

        def unreachable(request):
            raise httpx.ConnectError("refused", request=request)

        with self._client(unreachable) as client:
            assert client.check_health() is False


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class TestLoadSettings:
    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch):
        for name in (ENV_DB_URL, ENV_INTAKE_URL, ENV_INTAKE_TOKEN, "CUSTOM_TOKEN"):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        settings = load_settings()
        assert settings.db_url == DEFAULT_DB_URL
        assert settings.intake.configured is False
        assert settings.alerts.warning_days == 3
        assert settings.notices.department_emails == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.json")

    def test_from_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CUSTOM_TOKEN", "tok")
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "db_url": "sqlite:///file.db",
            "intake": {"base_url": "https://intake.example", "token_env": "CUSTOM_TOKEN", "timeout": 5},
            "notices": {
                "sender_name": "Pat Smith",
                "department_emails": {"legal": "legal@agency.example"},
            },
            "alerts": {"info_days": 8},
        }), encoding="utf-8")

        settings = load_settings(path)
        assert settings.db_url == "sqlite:///file.db"
        assert settings.intake.base_url == "https://intake.example"
        assert settings.intake.api_token == "tok"
        assert settings.intake.timeout == 5.0
        assert settings.notices.sender_name == "Pat Smith"
        assert settings.notices.email_for(Department.LEGAL) == "legal@agency.example"
        assert settings.notices.email_for(Department.IT) is None
        assert settings.alerts.info_days == 8
        assert settings.alerts.urgent_days == 1

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"db_url": "sqlite:///file.db"}), encoding="utf-8")
        monkeypatch.setenv(ENV_DB_URL, "sqlite:///env.db")
        monkeypatch.setenv(ENV_INTAKE_URL, "https://env.example")
        monkeypatch.setenv(ENV_INTAKE_TOKEN, "envtok")
        settings = load_settings(path)
        assert settings.db_url == "sqlite:///env.db"
        assert settings.intake.base_url == "https://env.example"
        assert settings.intake.api_token == "envtok"

    def test_unknown_department_raises(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"notices": {"department_emails": {"marketing": "m@x"}}}), encoding="utf-8")
        with pytest.raises(ValueError):
            load_settings(path)
