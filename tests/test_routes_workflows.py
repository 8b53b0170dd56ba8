"""Tests for workflow-run and job routes."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from actions_monitor.services.github_errors import GitHubAPIError, GitHubConfigurationError

EXECUTE = "actions_monitor.services.github.execute_request"


class TestListRuns:
    """Tests for GET /api/workflows/runs."""

    def test_list_runs_success(self, client: TestClient, sample_runs_payload):
        with patch(EXECUTE, new_callable=AsyncMock, return_value=sample_runs_payload) as mock_execute:
            response = client.get(
                "/api/workflows/runs",
                params={"event": "push", "actor": "octocat", "page": 2, "per_page": 10},
            )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 42
        assert data["page"] == 2
        assert data["perPage"] == 10
        assert [run["id"] for run in data["runs"]] == [555, 554]
        assert data["runs"][0]["jobs"] == "/api/workflows/runs/555/jobs"

        request = mock_execute.await_args.args[0]
        assert request.url == "https://api.github.test/repos/octo-org/hello-world/actions/runs"
        assert request.params == {"q": "event:push actor:octocat", "page": 2, "per_page": 10}

    def test_list_runs_without_filters(self, client: TestClient):
        with patch(
            EXECUTE, new_callable=AsyncMock, return_value={"total_count": 0, "workflow_runs": []}
        ) as mock_execute:
            response = client.get("/api/workflows/runs")

        assert response.status_code == 200
        assert response.json()["runs"] == []
        assert mock_execute.await_args.args[0].params == {"page": 1, "per_page": 30}

    def test_list_runs_api_error(self, client: TestClient):
        with patch(EXECUTE, new_callable=AsyncMock, side_effect=GitHubAPIError("search workflow runs failed: 500")):
            response = client.get("/api/workflows/runs")

        assert response.status_code == 502
        assert "500" in response.json()["detail"]

    def test_list_runs_configuration_error(self, client: TestClient):
        with patch(EXECUTE, new_callable=AsyncMock, side_effect=GitHubConfigurationError("Missing token")):
            response = client.get("/api/workflows/runs")

        assert response.status_code == 500
        assert "Missing token" in response.json()["detail"]

    def test_list_runs_missing_repository(self, client: TestClient, monkeypatch):
        monkeypatch.delenv("GITHUB_REPOSITORY")

        response = client.get("/api/workflows/runs")

        assert response.status_code == 500
        assert "GITHUB_REPOSITORY" in response.json()["detail"]

    def test_list_runs_invalid_page_size(self, client: TestClient):
        response = client.get("/api/workflows/runs", params={"per_page": 500})
        assert response.status_code == 422


class TestRunJobs:
    """Tests for GET /api/workflows/runs/{run_id}/jobs and the live job list."""

    def test_jobs_are_sorted_and_become_live(self, client: TestClient, sample_jobs_payload):
        with patch(EXECUTE, new_callable=AsyncMock, return_value=sample_jobs_payload) as mock_execute:
            response = client.get("/api/workflows/runs/555/jobs")

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "populated"
        assert data["total"] == 3
        assert [job["id"] for job in data["jobs"]] == [12, 13, 11]
        assert data["copyEnabled"] is False
        assert mock_execute.await_args.args[0].url == (
            "https://api.github.test/repos/octo-org/hello-world/actions/runs/555/jobs"
        )

        live = client.get("/api/workflows/jobs").json()
        assert [job["id"] for job in live["jobs"]] == [12, 13, 11]

    def test_failed_refresh_keeps_previous_list(self, client: TestClient, sample_jobs_payload):
        with patch(EXECUTE, new_callable=AsyncMock, return_value=sample_jobs_payload):
            client.get("/api/workflows/runs/555/jobs")

        with patch(EXECUTE, new_callable=AsyncMock, side_effect=GitHubAPIError("Get workflow-run jobs failed: 502")):
            response = client.get("/api/workflows/runs/555/jobs")

        assert response.status_code == 502
        live = client.get("/api/workflows/jobs").json()
        assert live["state"] == "populated"
        assert len(live["jobs"]) == 3

    def test_malformed_jobs_payload_returns_502(self, client: TestClient, sample_jobs_payload):
        with patch(EXECUTE, new_callable=AsyncMock, return_value=sample_jobs_payload):
            client.get("/api/workflows/runs/555/jobs")

        malformed = {"total_count": 1, "jobs": [{"run_id": 555, "status": "queued"}]}
        with patch(EXECUTE, new_callable=AsyncMock, return_value=malformed):
            response = client.get("/api/workflows/runs/555/jobs")

        assert response.status_code == 502
        assert "malformed payload" in response.json()["detail"]
        live = client.get("/api/workflows/jobs").json()
        assert [job["id"] for job in live["jobs"]] == [12, 13, 11]

    def test_mixed_timestamp_offsets_are_sorted(self, client: TestClient):
        payload = {
            "total_count": 2,
            "jobs": [
                {"id": 1, "run_id": 555, "status": "completed", "completed_at": "2024-01-01T10:00:00Z"},
                {"id": 2, "run_id": 555, "status": "completed", "completed_at": "2024-01-01T11:00:00"},
            ],
        }
        with patch(EXECUTE, new_callable=AsyncMock, return_value=payload):
            response = client.get("/api/workflows/runs/555/jobs")

        assert response.status_code == 200
        assert [job["id"] for job in response.json()["jobs"]] == [2, 1]

    def test_live_list_starts_empty(self, client: TestClient):
        data = client.get("/api/workflows/jobs").json()

        assert data["state"] == "empty"
        assert data["jobs"] == []
        assert data["selectedJobId"] is None


class TestWatch:
    """Tests for background refresh of a run's jobs."""

    def test_watch_and_stop(self, client: TestClient, sample_jobs_payload):
        refresher = client.app.state.jobs_refresher
        with patch(EXECUTE, new_callable=AsyncMock, return_value=sample_jobs_payload):
            response = client.post("/api/workflows/runs/555/watch", params={"interval": 5})

            assert response.status_code == 202
            assert response.json() == {"runId": 555, "interval": 5.0, "polling": True}
            assert refresher.is_polling is True

            stop_response = client.delete("/api/workflows/watch")

        assert stop_response.status_code == 204
        assert refresher.is_polling is False

    def test_watch_rejects_short_interval(self, client: TestClient):
        response = client.post("/api/workflows/runs/555/watch", params={"interval": 0.1})

        assert response.status_code == 422

    def test_stop_without_watch(self, client: TestClient):
        assert client.delete("/api/workflows/watch").status_code == 204


class TestSelection:
    """Tests for job selection endpoints."""

    def test_select_and_clear(self, client: TestClient, sample_jobs_payload):
        with patch(EXECUTE, new_callable=AsyncMock, return_value=sample_jobs_payload):
            client.get("/api/workflows/runs/555/jobs")

        assert client.get("/api/workflows/jobs/selected").json() is None

        response = client.put("/api/workflows/jobs/selection", json={"jobId": 13})
        assert response.status_code == 200
        assert response.json()["name"] == "lint"

        selected = client.get("/api/workflows/jobs/selected").json()
        assert selected["id"] == 13
        assert selected["statusLabel"] == "failure"
        assert client.get("/api/workflows/jobs").json()["selectedJobId"] == 13

        assert client.delete("/api/workflows/jobs/selection").status_code == 204
        assert client.get("/api/workflows/jobs/selected").json() is None

    def test_select_unknown_job(self, client: TestClient):
        response = client.put("/api/workflows/jobs/selection", json={"jobId": 404})

        assert response.status_code == 404
        assert response.json()["detail"] == "Job not found"


class TestRerunAndLogs:
    """Tests for rerun and log download endpoints."""

    def test_rerun_success(self, client: TestClient):
        with patch(EXECUTE, new_callable=AsyncMock, return_value=None) as mock_execute:
            response = client.post("/api/workflows/runs/555/rerun")

        assert response.status_code == 200
        assert response.json() == {"message": "Workflow rerun requested", "runId": 555}
        request = mock_execute.await_args.args[0]
        assert request.method == "POST"
        assert request.url.endswith("/actions/runs/555/rerun")

    def test_rerun_api_error(self, client: TestClient):
        with patch(EXECUTE, new_callable=AsyncMock, side_effect=GitHubAPIError("Rerun workflow failed: 403")):
            response = client.post("/api/workflows/runs/555/rerun")

        assert response.status_code == 502

    def test_download_logs(self, client: TestClient):
        with patch(EXECUTE, new_callable=AsyncMock, return_value=b"PK\x03\x04zip"):
            response = client.get("/api/workflows/runs/555/logs")

        assert response.status_code == 200
        assert response.content == b"PK\x03\x04zip"
        assert response.headers["content-type"] == "application/zip"
        assert "run-555-logs.zip" in response.headers["content-disposition"]

    def test_download_logs_api_error(self, client: TestClient):
        with patch(EXECUTE, new_callable=AsyncMock, side_effect=GitHubAPIError("Download Workflow log failed: 410")):
            response = client.get("/api/workflows/runs/555/logs")

        assert response.status_code == 502
