import os
import sys

import requests

# Post a sample run task invocation to a locally running receiver.
# The callback URL points at nothing, so the worker will log a callback failure.

URL = os.getenv("TASKCHECK_URL", "http://localhost:80/")

payload = {
    "payload_version": 1,
    "access_token": "example-run-token",
    "stage": "pre_plan",
    "is_speculative": False,
    "task_result_id": "taskrs-example",
    "task_result_enforcement_level": "advisory",
    "task_result_callback_url": "http://localhost:9/api/v2/task-results/taskrs-example/callback",
    "run_id": "run-example",
    "run_message": "Triggered via example",
    "workspace_id": sys.argv[1] if len(sys.argv) > 1 else "ws-example",
    "workspace_name": "example",
    "organization_name": "example-org",
}

if __name__ == '__main__':
    resp = requests.post(URL, json=payload, headers={"User-Agent": "TFC/1.0 (+https://app.terraform.io; TFC)"}, timeout=10)
    print(f"{resp.status_code} {resp.text}")
