"""Logging utilities"""

import json
from datetime import datetime
from zoneinfo import ZoneInfo

import one_click_apply.config as config


def log_result(job_url, status, reason="", steps_completed=0, log_file=None, **extra):
    """Log application result to JSONL file"""
    result = {
        "timestamp": datetime.now(ZoneInfo(config.LOG_TIMEZONE)).isoformat(),
        "job_url": job_url,
        "status": status,
        "steps_completed": steps_completed,
    }
    if reason:
        result["failure_reason"] = reason
    result.update(extra)

    with open(log_file or config.RESULT_LOG_FILE, "a", encoding="utf-8") as f:
        f.write(json.dumps(result) + "\n")

    print(f"[{status}] {job_url}")
    if reason:
        print(f"  Reason: {reason}")
