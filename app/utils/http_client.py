import threading
from typing import Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from config.settings import (
    TFE_VERIFY_TLS,
    TFE_CA_BUNDLE,
    CONNECT_TIMEOUT_S,
    LIST_READ_TIMEOUT_S,
    CALLBACK_READ_TIMEOUT_S,
)


_thread_local = threading.local()


def _create_session() -> requests.Session:
    session = requests.Session()
    # only idempotent reads are retried; task-result PATCHes go out once
    retries = Retry(
        total=2,
        backoff_factor=0.2,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(pool_connections=4, pool_maxsize=8, max_retries=retries)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def get_session() -> requests.Session:
    session = getattr(_thread_local, "session", None)
    if session is None:
        session = _create_session()
        _thread_local.session = session
    return session


def get_verify_param():
    return TFE_CA_BUNDLE or TFE_VERIFY_TLS


def timeouts_for(kind: str) -> Tuple[float, float | None]:
    if kind == "list":
        return (CONNECT_TIMEOUT_S, LIST_READ_TIMEOUT_S)
    if kind == "callback":
        return (CONNECT_TIMEOUT_S, CALLBACK_READ_TIMEOUT_S)
    return (CONNECT_TIMEOUT_S, LIST_READ_TIMEOUT_S)
