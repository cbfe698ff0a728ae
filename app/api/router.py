from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from config.settings import RUN_TASK_USER_AGENT, REJECTION_MESSAGE
from models.schema import InvocationPayload
from services.queue_service import JobQueue
from utils.logging_setup import logger

# Create router
router = APIRouter()


async def get_job_queue(request: Request) -> JobQueue:
    return request.app.state.job_queue


def _reject() -> PlainTextResponse:
    return PlainTextResponse(REJECTION_MESSAGE, status_code=405)


@router.post("/")
async def receive_run_task(request: Request, job_queue: JobQueue = Depends(get_job_queue)):
    if request.headers.get("user-agent") != RUN_TASK_USER_AGENT:
        return _reject()

    body = await request.body()
    try:
        payload = InvocationPayload.model_validate_json(body)
    except ValidationError as e:
        logger.warning(f"bad run task payload: {e}")
        return PlainTextResponse(str(e), status_code=400)

    # put() blocks while the queue is full; the only call on this route that takes a worker thread
    await run_in_threadpool(job_queue.put, payload)
    logger.info(f"queued run={payload.run_id} stage={payload.stage} org={payload.organization_name}")
    return PlainTextResponse("200 OK", status_code=200)


@router.api_route("/", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"], include_in_schema=False)
async def reject_other_methods():
    return _reject()
