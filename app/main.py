import threading
from contextlib import asynccontextmanager
from fastapi import FastAPI

from api.router import router
from config.settings import PORT, TFE_TOKEN
from services.queue_service import init_queue
from services.tfe_client import TFEClient
from services.worker_service import start_worker
from utils.logging_setup import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    if not TFE_TOKEN:
        logger.warning("TFE_TOKEN is not set; workspace variable lookups will be rejected")
    app.state.job_queue = init_queue()
    # fresh per lifespan; set on shutdown
    stop_event = threading.Event()
    app.state.worker = start_worker(app.state.job_queue, TFEClient(), stop_event)
    logger.info("taskcheck service started")
    try:
        yield
    finally:
        stop_event.set()
        logger.info("taskcheck service stopping")


app = FastAPI(title="taskcheck: Terraform Cloud run task credential check", lifespan=lifespan)
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Server listening on port {PORT}...")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
