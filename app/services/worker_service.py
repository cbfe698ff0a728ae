import queue
import threading
from typing import List

from config.settings import LOOKUP_FAIL_OPEN, PACING_INTERVAL_S
from models.schema import InvocationPayload, TaskResult, TaskResultStatus, WorkspaceVariable
from services.policy_service import evaluate
from services.queue_service import JobQueue
from services.tfe_client import TFEClient
from utils.logging_setup import logger

LOOKUP_FAILED_MESSAGE = (
    "Workspace variables could not be listed, so the credential check was not completed. "
    "Start another run to try again."
)


def _lookup_keys(payload: InvocationPayload, client: TFEClient) -> List[str]:
    if not payload.can_lookup:
        logger.warning(f"no workspace id run={payload.run_id}; skipping variable lookup")
        return []
    variables: List[WorkspaceVariable] = client.list_workspace_variables(payload.workspace_id)
    return [v.key for v in variables]


def process_job(payload: InvocationPayload, client: TFEClient, fail_open: bool = LOOKUP_FAIL_OPEN) -> TaskResult:
    logger.info(f"processing job run={payload.run_id} workspace={payload.workspace_id}")

    try:
        keys = _lookup_keys(payload, client)
        result = evaluate(keys)
    except Exception as e:
        logger.error(f"variable lookup failed run={payload.run_id} workspace={payload.workspace_id}: {e}")
        if fail_open:
            result = evaluate([])
        else:
            result = TaskResult(status=TaskResultStatus.FAILED, message=LOOKUP_FAILED_MESSAGE)

    if result.status == TaskResultStatus.FAILED:
        logger.info(f"restricted credentials found run={payload.run_id}")

    if payload.can_callback:
        try:
            client.send_task_result(payload.task_result_callback_url, payload.access_token, result)
        except Exception as e:
            logger.error(f"callback failed run={payload.run_id}: {e}")
    else:
        logger.warning(f"missing callback url or token run={payload.run_id}; result not reported")

    logger.info(f"job complete run={payload.run_id} status={result.status.value}")
    return result


def run_worker(job_queue: JobQueue, client: TFEClient, stop_event: threading.Event, pacing_s: float = PACING_INTERVAL_S):
    logger.info("worker start")

    while not stop_event.is_set():
        # 1s timeout to allow loop exit
        try:
            payload = job_queue.get(timeout=1)
        except queue.Empty:
            continue

        try:
            process_job(payload, client)
        except Exception:
            logger.exception(f"job crashed run={payload.run_id}")
        finally:
            job_queue.task_done()

        # fixed pause between jobs caps the remote call rate
        stop_event.wait(pacing_s)

    logger.info("worker stop")


def start_worker(job_queue: JobQueue, client: TFEClient, stop_event: threading.Event) -> threading.Thread:
    t = threading.Thread(target=run_worker, args=(job_queue, client, stop_event), name="taskcheck-worker", daemon=True)
    t.start()
    return t
