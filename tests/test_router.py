"""Tests for the run task ingestion endpoint."""

from __future__ import annotations

import json
import threading
import time

import anyio
import pytest
from fastapi.testclient import TestClient

from api.router import get_job_queue
from conftest import TFC_USER_AGENT, make_payload
from main import app
from services.queue_service import JobQueue

REJECTION = "You aren't a TFC Run Task, go away"


def _body(**overrides) -> str:
    doc = {
        "payload_version": 1,
        "access_token": "run-token",
        "task_result_callback_url": "https://app.terraform.io/api/v2/task-results/taskrs-1/callback",
        "run_id": "run-abc",
        "workspace_id": "ws-123",
        "organization_name": "acme",
    }
    doc.update(overrides)
    return json.dumps(doc)


@pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
def test_other_methods_are_rejected(client, job_queue, method):
    resp = client.request(method, "/", headers={"User-Agent": TFC_USER_AGENT})
    assert resp.status_code == 405
    assert resp.text == REJECTION
    assert job_queue.qsize() == 0


def test_wrong_user_agent_is_rejected(client, job_queue):
    resp = client.post("/", content=_body(), headers={"User-Agent": "curl/8.0"})
    assert resp.status_code == 405
    assert resp.text == REJECTION
    assert job_queue.qsize() == 0


def test_user_agent_match_is_case_sensitive(client, job_queue):
    resp = client.post("/", content=_body(), headers={"User-Agent": TFC_USER_AGENT.lower()})
    assert resp.status_code == 405
    assert job_queue.qsize() == 0


def test_invalid_json_is_bad_request(client, job_queue):
    resp = client.post("/", content="{not-json", headers={"User-Agent": TFC_USER_AGENT})
    assert resp.status_code == 400
    assert resp.text
    assert job_queue.qsize() == 0


def test_valid_payload_is_queued(client, job_queue):
    resp = client.post("/", content=_body(), headers={"User-Agent": TFC_USER_AGENT})
    assert resp.status_code == 200
    assert resp.text == "200 OK"
    assert job_queue.qsize() == 1
    queued = job_queue.get(timeout=0)
    assert queued.run_id == "run-abc"
    assert queued.workspace_id == "ws-123"


def test_unknown_fields_are_ignored(client, job_queue):
    resp = client.post("/", content=_body(vcs_branch="main", brand_new_field=[1]), headers={"User-Agent": TFC_USER_AGENT})
    assert resp.status_code == 200
    assert job_queue.get(timeout=0).vcs_branch == "main"


def test_requests_queue_in_arrival_order(client, job_queue):
    for i in range(3):
        client.post("/", content=_body(run_id=f"run-{i}"), headers={"User-Agent": TFC_USER_AGENT})
    assert [job_queue.get(timeout=0).run_id for _ in range(3)] == ["run-0", "run-1", "run-2"]


def test_null_descriptive_fields_are_accepted(client, job_queue):
    # shape of a pre-plan delivery for a workspace with no VCS connection
    body = _body(
        stage="pre_plan",
        is_speculative=None,
        run_message=None,
        vcs_repo_url=None,
        vcs_branch=None,
        vcs_pull_request_url=None,
        vcs_commit_url=None,
        workspace_working_directory=None,
    )
    resp = client.post("/", content=body, headers={"User-Agent": TFC_USER_AGENT})

    assert resp.status_code == 200
    assert job_queue.qsize() == 1
    queued = job_queue.get(timeout=0)
    assert queued.vcs_branch == ""
    assert queued.is_speculative is False
    assert queued.workspace_id == "ws-123"


def _limit_threadpool_to_one():
    anyio.to_thread.current_default_thread_limiter().total_tokens = 1


def test_rejections_answer_while_producers_are_blocked():
    full = JobQueue(capacity=1)
    full.put(make_payload(run_id="run-pending"))

    async def _full_queue():
        return full

    app.dependency_overrides[get_job_queue] = _full_queue
    try:
        with TestClient(app) as c:
            c.portal.call(_limit_threadpool_to_one)
            results = {}

            def produce():
                results["resp"] = c.post("/", content=_body(run_id="run-blocked"), headers={"User-Agent": TFC_USER_AGENT})

            producer = threading.Thread(target=produce, daemon=True)
            producer.start()
            time.sleep(0.3)
            assert producer.is_alive()

            assert c.get("/").status_code == 405
            assert c.post("/", content=_body(), headers={"User-Agent": "curl/8.0"}).status_code == 405
            assert c.post("/", content="{nope", headers={"User-Agent": TFC_USER_AGENT}).status_code == 400

            assert full.get(timeout=1).run_id == "run-pending"
            producer.join(timeout=5)
            assert results["resp"].status_code == 200
            assert full.get(timeout=1).run_id == "run-blocked"
    finally:
        app.dependency_overrides.clear()
