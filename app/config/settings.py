import os

# Configuration settings
TFE_ADDRESS = os.getenv("TFE_ADDRESS", "https://app.terraform.io").rstrip("/")
TFE_TOKEN = os.getenv("TFE_TOKEN", "")
PORT = int(os.getenv("TASKCHECK_PORT", "80"))
LOG_LEVEL = os.getenv("TASKCHECK_LOG_LEVEL", "INFO").upper()

# Helpers
def _parse_bool(value: str, default: bool = True) -> bool:
    if value is None:
        return default
    v = str(value).strip().lower()
    if v in ("1", "true", "yes", "y", "on"): return True
    if v in ("0", "false", "no", "n", "off"): return False
    return default

# Report "passed" when the variable lookup itself errors (matches zero variables)
LOOKUP_FAIL_OPEN = _parse_bool(os.getenv("TASKCHECK_LOOKUP_FAIL_OPEN", "true"), True)

# Remote API HTTP configuration
TFE_VERIFY_TLS = _parse_bool(os.getenv("TASKCHECK_TFE_VERIFY_TLS", "true"), True)
# Optional custom CA bundle path for private TFE installs; takes precedence over boolean verify
TFE_CA_BUNDLE = os.getenv("TASKCHECK_TFE_CA_BUNDLE") or ""

# Timeouts (seconds)
CONNECT_TIMEOUT_S = float(os.getenv("TASKCHECK_CONNECT_TIMEOUT_S", "5"))
LIST_READ_TIMEOUT_S = float(os.getenv("TASKCHECK_LIST_READ_TIMEOUT_S", "30"))
CALLBACK_READ_TIMEOUT_S = float(os.getenv("TASKCHECK_CALLBACK_READ_TIMEOUT_S", "15"))

# Fixed for the process lifetime
QUEUE_CAPACITY = 100
PACING_INTERVAL_S = 1.0
RUN_TASK_USER_AGENT = "TFC/1.0 (+https://app.terraform.io; TFC)"
REJECTION_MESSAGE = "You aren't a TFC Run Task, go away"
JSONAPI_CONTENT_TYPE = "application/vnd.api+json"

RESTRICTED_CREDENTIAL_KEYS = frozenset({
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_EXPIRATION",
    "AWS_SESSION_TOKEN",
})
