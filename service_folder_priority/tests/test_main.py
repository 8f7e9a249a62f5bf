"""
Unit tests for Folder Priority main service.
"""

import pytest
from fastapi.testclient import TestClient

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_folder_priority.app.main import FolderPriorityService, create_app
from service_folder_priority.app.rules.models import (
    OutputMode, PriorityConfig, ResolutionStrategy
)


class TestFolderPriorityService:
    """Test cases for FolderPriorityService."""

    @pytest.fixture
    def priority_config(self):
        """Rule configuration used by the service under test."""
        return PriorityConfig(rules="Guides:1;Manuals:5", default_priority="9999")

    @pytest.fixture
    def service(self, priority_config):
        """Create FolderPriorityService instance."""
        return FolderPriorityService(config_provider=lambda: priority_config)

    @pytest.fixture
    def client(self, service):
        """Create test client."""
        return TestClient(service.app)

    @pytest.fixture
    def skill_request(self):
        """Skill envelope with three records."""
        return {
            "values": [
                {"recordId": "b", "data": {"storagePath": "/docs/Manuals/m.pdf", "title": "M"}},
                {"recordId": "a", "data": {"metadata_storage_path": "/docs/Guides/Manuals/g.pdf"}},
                {"recordId": "c", "data": {"title": "nothing"}},
            ]
        }

    def test_root_endpoint(self, client):
        """Test root endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "folder_priority"
        assert "segment_decoding" in data["capabilities"]

    def test_health_endpoint(self, client):
        """Test health endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "folder_priority"
        assert data["status"] == "ok"

    def test_envelope_request(self, client, skill_request):
        """Test a skill batch keeps ids and order and merges priorities."""
        response = client.post("/api/folder-priority", json=skill_request)

        assert response.status_code == 200
        values = response.json()["values"]
        assert [v["recordId"] for v in values] == ["b", "a", "c"]
        assert values[0]["data"] == {"storagePath": "/docs/Manuals/m.pdf", "title": "M", "priority": 5}
        assert values[1]["data"]["priority"] == 5
        assert values[2]["data"]["priority"] == 9999

    def test_bare_object_request(self, client):
        """Test the single object fallback."""
        response = client.post(
            "/api/folder-priority",
            content=b'{"recordId":"42","storagePath":"/a/Manuals/x"}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        values = response.json()["values"]
        assert len(values) == 1
        assert values[0]["recordId"] == "42"
        assert values[0]["data"]["priority"] == 5

    def test_unparseable_body(self, client):
        """Test a body that is not JSON is rejected with plain text."""
        response = client.post(
            "/api/folder-priority",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")
        assert "expected skill 'values' array or single JSON object" in response.text

    def test_json_array_rejected(self, client):
        """Test a JSON array body is rejected."""
        response = client.post("/api/folder-priority", json=[{"storagePath": "/a"}])

        assert response.status_code == 400

    def test_request_id_echoed(self, client, skill_request):
        """Test the correlation header is returned."""
        response = client.post(
            "/api/folder-priority",
            json=skill_request,
            headers={"X-Request-ID": "req-123"},
        )

        assert response.headers["X-Request-ID"] == "req-123"

    def test_nan_literal_rejected(self, client):
        """Test a NaN literal in the body is rejected with plain text."""
        response = client.post(
            "/api/folder-priority",
            content=b'{"values":[{"recordId":"1","data":{"storagePath":"/a/Manuals/x","score":NaN}}]}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")

    def test_deeply_nested_body_rejected(self, client):
        """Test a body nested past the parser depth is rejected with plain text."""
        depth = 100000
        response = client.post(
            "/api/folder-priority",
            content=b'{"d": ' + b"[" * depth + b"]" * depth + b"}",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")

    def test_cors_without_credentials(self, monkeypatch, priority_config):
        """Test local CORS allows any origin but never credentials."""
        monkeypatch.setenv("SKILL_ENV", "local")
        client = TestClient(FolderPriorityService(config_provider=lambda: priority_config).app)

        response = client.get("/health", headers={"Origin": "http://localhost:3000"})

        assert response.headers["access-control-allow-origin"] == "*"
        assert "access-control-allow-credentials" not in response.headers

    def test_rules_endpoint(self, client):
        """Test the rule diagnostics endpoint."""
        response = client.get("/api/folder-priority/rules")

        assert response.status_code == 200
        data = response.json()
        assert data["rules"] == [
            {"key": "manuals", "priority": 5},
            {"key": "guides", "priority": 1},
        ]
        assert data["default_priority"] == 9999
        assert data["strategy"] == "substring"
        assert data["output_mode"] == "merge"

    def test_metrics_endpoint(self, client, skill_request):
        """Test skill metrics are exported."""
        client.post("/api/folder-priority", json=skill_request)
        client.post("/api/folder-priority", content=b"not json")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert 'skill_records_total{outcome="matched"} 2.0' in response.text
        assert 'skill_records_total{outcome="no_path"} 1.0' in response.text
        assert "skill_payload_rejections_total 1.0" in response.text

    def test_config_read_per_request(self, skill_request):
        """Test configuration changes apply to the next request."""
        configs = [
            PriorityConfig(rules="Manuals:5", default_priority="9999"),
            PriorityConfig(rules="Manuals:8", default_priority="9999"),
        ]
        client = TestClient(create_app(config_provider=lambda: configs[0]))

        first = client.post("/api/folder-priority", json=skill_request).json()
        configs.pop(0)
        second = client.post("/api/folder-priority", json=skill_request).json()

        assert first["values"][0]["data"]["priority"] == 5
        assert second["values"][0]["data"]["priority"] == 8


class TestFolderPriorityContracts:
    """Test cases for alternative deployment contracts."""

    def test_replace_output_contract(self):
        """Test the folderPriority replacement contract."""
        config = PriorityConfig(
            rules="Guides:1",
            default_priority="50",
            output_key="folderPriority",
            output_mode=OutputMode.REPLACE,
        )
        client = TestClient(create_app(config_provider=lambda: config))

        response = client.post(
            "/api/folder-priority",
            json={"values": [{"recordId": "1", "data": {"storagePath": "/x/Guides/y", "title": "T"}}]},
        )

        assert response.json() == {"values": [{"recordId": "1", "data": {"folderPriority": 1}}]}

    def test_segment_strategy(self):
        """Test segment decoding through the API."""
        config = PriorityConfig(strategy=ResolutionStrategy.SEGMENT, anchor="4142_Guides")
        client = TestClient(create_app(config_provider=lambda: config))

        response = client.post(
            "/api/folder-priority",
            json={"recordId": "7", "storagePath": "/docs/4142_Guides/41421_Subfolder/file.pdf"},
        )

        assert response.json()["values"][0]["data"]["priority"] == 2

    def test_environment_configuration(self, monkeypatch):
        """Test rules are read from environment variables."""
        monkeypatch.setenv("FolderPriorityRules", "Guides:1;Manuals:5")
        monkeypatch.setenv("DefaultFolderPriority", "123")
        client = TestClient(create_app())

        response = client.post(
            "/api/folder-priority",
            json={"values": [
                {"recordId": "1", "data": {"storagePath": "/a/Manuals/x"}},
                {"recordId": "2", "data": {"storagePath": "/a/Other/x"}},
            ]},
        )

        values = response.json()["values"]
        assert values[0]["data"]["priority"] == 5
        assert values[1]["data"]["priority"] == 123

    def test_environment_without_rules(self, monkeypatch):
        """Test missing configuration degrades to the unranked default."""
        monkeypatch.delenv("FolderPriorityRules", raising=False)
        monkeypatch.delenv("FOLDER_PRIORITY_RULES", raising=False)
        monkeypatch.delenv("DefaultFolderPriority", raising=False)
        monkeypatch.delenv("DEFAULT_FOLDER_PRIORITY", raising=False)
        client = TestClient(create_app())

        response = client.post("/api/folder-priority", json={"storagePath": "/a/Manuals/x"})

        assert response.status_code == 200
        assert response.json()["values"][0]["data"]["priority"] == 9999
