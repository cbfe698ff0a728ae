from typing import AbstractSet, Iterable, List

from config.settings import RESTRICTED_CREDENTIAL_KEYS
from models.schema import TaskResult, TaskResultStatus

CONTACT_ADDRESS = "platform@mycoolcompany.com"
PASSED_MESSAGE = "No erroneous credentials set on this workspace. Good job! --Platform Engineering Team"


def find_restricted_keys(keys: Iterable[str], restricted: AbstractSet[str] = RESTRICTED_CREDENTIAL_KEYS) -> List[str]:
    """Return the keys that appear in ``restricted``, in input order, duplicates kept."""
    return [k for k in keys if k in restricted]


def failure_message(found: List[str]) -> str:
    return (
        "This workspace appears to have AWS credential variables set on it. "
        "AWS credentials are managed on your behalf by the Platform Engineering team. "
        f"These must be removed immediately to ensure compliance: {', '.join(found)}. "
        'Go to the "Variables" page in the left side nav and remove these variables, '
        "then start another run. "
        f"If you have any questions, feel free to reach out to {CONTACT_ADDRESS}. Thanks!"
    )


def evaluate(keys: Iterable[str]) -> TaskResult:
    found = find_restricted_keys(keys)
    if found:
        return TaskResult(status=TaskResultStatus.FAILED, message=failure_message(found))
    return TaskResult(status=TaskResultStatus.PASSED, message=PASSED_MESSAGE)
