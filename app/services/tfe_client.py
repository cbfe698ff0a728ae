from typing import Any, Dict, List, Optional

import requests

from config.settings import TFE_ADDRESS, TFE_TOKEN, JSONAPI_CONTENT_TYPE
from models.schema import TaskResult, WorkspaceVariable
from utils.http_client import get_session, get_verify_param, timeouts_for
from utils.logging_setup import logger


class TFEClientError(Exception):
    pass


class CallbackError(TFEClientError):
    def __init__(self, status_code: int, body: str):
        super().__init__(f"task result callback returned {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class TFEClient:
    """The two remote calls a job needs: list variables and report a task result.

    Variable listing authenticates with the process token; the callback uses
    the run-scoped token delivered in the payload.
    """

    def __init__(self, address: str = TFE_ADDRESS, token: str = TFE_TOKEN):
        self.address = address.rstrip("/")
        self.token = token

    def _headers(self, token: str) -> Dict[str, str]:
        return {
            "Content-Type": JSONAPI_CONTENT_TYPE,
            "Authorization": f"Bearer {token}",
        }

    def list_workspace_variables(self, workspace_id: str) -> List[WorkspaceVariable]:
        session = get_session()
        url: Optional[str] = f"{self.address}/api/v2/workspaces/{workspace_id}/vars"
        variables: List[WorkspaceVariable] = []
        while url:
            resp = session.get(
                url,
                headers=self._headers(self.token),
                timeout=timeouts_for("list"),
                verify=get_verify_param(),
            )
            resp.raise_for_status()
            doc: Dict[str, Any] = resp.json()
            variables.extend(WorkspaceVariable.from_resource(item) for item in doc.get("data") or [])
            url = (doc.get("links") or {}).get("next")
        logger.debug(f"listed vars workspace={workspace_id} count={len(variables)}")
        return variables

    def send_task_result(self, callback_url: str, access_token: str, result: TaskResult) -> None:
        session = get_session()
        resp = session.patch(
            callback_url,
            json=result.to_callback_document(),
            headers=self._headers(access_token),
            timeout=timeouts_for("callback"),
            verify=get_verify_param(),
        )
        if resp.status_code != 200:
            raise CallbackError(resp.status_code, resp.text)
