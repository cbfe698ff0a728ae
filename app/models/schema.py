from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class InvocationPayload(BaseModel):
    """One run task delivery as POSTed by Terraform Cloud."""

    model_config = ConfigDict(extra="ignore")

    payload_version: int = 0
    access_token: str = Field("", repr=False, description="Run-scoped token for the callback")
    stage: str = ""
    is_speculative: bool = False
    task_result_id: str = ""
    task_result_enforcement_level: str = ""
    task_result_callback_url: str = ""
    run_app_url: str = ""
    run_id: str = ""
    run_message: str = ""
    run_created_at: str = ""
    run_created_by: str = ""
    workspace_id: str = ""
    workspace_name: str = ""
    workspace_app_url: str = ""
    organization_name: str = ""
    vcs_repo_url: str = ""
    vcs_branch: str = ""
    vcs_pull_request_url: str = ""
    vcs_commit_url: str = ""
    configuration_version_id: str = ""
    configuration_version_download_url: str = ""
    workspace_working_directory: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, v, info: ValidationInfo):
        # JSON null reads as the empty default, e.g. vcs_* on workspaces without VCS
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

    @property
    def can_lookup(self) -> bool:
        return bool(self.workspace_id)

    @property
    def can_callback(self) -> bool:
        return bool(self.access_token and self.task_result_callback_url)


class WorkspaceVariable(BaseModel):
    key: str
    value: Optional[str] = None  # null for sensitive variables
    category: str = ""
    sensitive: bool = False

    @classmethod
    def from_resource(cls, resource: Dict[str, Any]) -> "WorkspaceVariable":
        attrs = resource.get("attributes") or {}
        return cls(
            key=attrs.get("key", ""),
            value=attrs.get("value"),
            category=attrs.get("category") or "",
            sensitive=bool(attrs.get("sensitive", False)),
        )


class TaskResultStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"


class TaskResult(BaseModel):
    status: TaskResultStatus
    message: str
    url: str = ""

    def to_callback_document(self) -> Dict[str, Any]:
        return {
            "data": {
                "type": "task-results",
                "attributes": {
                    "status": self.status.value,
                    "message": self.message,
                    "url": self.url,
                },
            }
        }
