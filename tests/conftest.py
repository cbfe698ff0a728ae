"""Shared test fixtures."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.router import get_job_queue
from main import app
from models.schema import InvocationPayload, WorkspaceVariable
from services.queue_service import JobQueue
from services.tfe_client import CallbackError

TFC_USER_AGENT = "TFC/1.0 (+https://app.terraform.io; TFC)"


def make_payload(**overrides) -> InvocationPayload:
    fields = {
        "payload_version": 1,
        "access_token": "run-token",
        "stage": "pre_plan",
        "task_result_id": "taskrs-1",
        "task_result_enforcement_level": "mandatory",
        "task_result_callback_url": "https://app.terraform.io/api/v2/task-results/taskrs-1/callback",
        "run_id": "run-abc",
        "workspace_id": "ws-123",
        "workspace_name": "networking",
        "organization_name": "acme",
    }
    fields.update(overrides)
    return InvocationPayload(**fields)


class FakeTFEClient:
    """Records remote calls instead of making them."""

    def __init__(self, keys=None, list_error=None, callback_error=None):
        self.keys = list(keys or [])
        self.list_error = list_error
        self.callback_error = callback_error
        self.listed = []
        self.callbacks = []

    def list_workspace_variables(self, workspace_id):
        self.listed.append(workspace_id)
        if self.list_error:
            raise self.list_error
        return [WorkspaceVariable(key=k, value="x") for k in self.keys]

    def send_task_result(self, callback_url, access_token, result):
        self.callbacks.append((callback_url, access_token, result))
        if self.callback_error:
            raise self.callback_error


@pytest.fixture()
def fake_client():
    return FakeTFEClient()


@pytest.fixture()
def job_queue():
    return JobQueue(capacity=100)


@pytest.fixture()
def client(job_queue):
    # no `with` block: lifespan (and the real worker thread) stays off
    async def _job_queue():
        return job_queue

    app.dependency_overrides[get_job_queue] = _job_queue
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def rejected_callback():
    return CallbackError(500, "boom")
