"""
Integration tests for the configuration validation endpoints.
"""

import copy
from pathlib import Path
from typing import Any, Dict

from fastapi.testclient import TestClient


class TestValidateEndpoint:
    """POST /v1/config:validate"""

    def test_valid_configuration(self, test_client: TestClient, config_data: Dict[str, Any]) -> None:
        """A valid tree returns an empty result."""
        response = test_client.post(
            "/v1/config:validate",
            json={"config": config_data, "checkPaths": True},
        )

        assert response.status_code == 200
        assert response.json() == {"errors": [], "warnings": []}

    def test_errors_are_returned_not_raised(self, test_client: TestClient) -> None:
        """A result with errors is still a 200: the errors are the answer."""
        response = test_client.post("/v1/config:validate", json={"config": {}})

        assert response.status_code == 200
        fields = [e["field"] for e in response.json()["errors"]]
        assert fields[0] == "websites"
        assert "database.driver" in fields
        assert "pvFilter.excludePatterns" in fields

    def test_path_checks_only_when_requested(
        self, test_client: TestClient, config_data: Dict[str, Any], tmp_path: Path
    ) -> None:
        data = copy.deepcopy(config_data)
        data["websites"][0]["logPath"] = str(tmp_path / "gone.log")

        without = test_client.post("/v1/config:validate", json={"config": data})
        assert without.json()["errors"] == []

        with_paths = test_client.post("/v1/config:validate", json={"config": data, "checkPaths": True})
        assert [e["field"] for e in with_paths.json()["errors"]] == ["websites[0].logPath"]

    def test_remote_check_warning(self, test_client: TestClient, config_data: Dict[str, Any]) -> None:
        response = test_client.post(
            "/v1/config:validate",
            json={"config": config_data, "checkRemote": True},
        )

        data = response.json()
        assert data["errors"] == []
        assert [w["field"] for w in data["warnings"]] == ["websites[1].sources[1]"]

    def test_malformed_structure_is_400(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/v1/config:validate",
            json={"config": {"websites": [{"name": "blog", "sources": "not-a-list"}]}},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "configuration_error"
        assert data["details"]["errors"][0]["field"] == "websites.0.sources"

    def test_missing_config_body_is_422(self, test_client: TestClient) -> None:
        response = test_client.post("/v1/config:validate", json={"checkPaths": True})
        assert response.status_code == 422

    def test_ad_hoc_validation_does_not_change_last_result(self, test_client: TestClient) -> None:
        test_client.post("/v1/config:validate", json={"config": {}})

        last = test_client.get("/v1/config/validation").json()
        assert last["result"]["errors"] == []
        assert test_client.get("/readyz").status_code == 200


class TestLastValidationEndpoint:
    """GET /v1/config/validation"""

    def test_reports_startup_result(self, test_client: TestClient) -> None:
        response = test_client.get("/v1/config/validation")

        assert response.status_code == 200
        assert response.json() == {
            "validated": True,
            "result": {"errors": [], "warnings": []},
        }
