# --- laundrygo/utils/api.py ---
from datetime import datetime, timedelta, timezone
from flask import current_app, has_app_context

def utcnow() -> datetime:
    # naive UTC, matching what the DateTime columns store
    return datetime.now(timezone.utc).replace(tzinfo=None)

def _api_time_human():
    hours = current_app.config.get("API_UTC_OFFSET_HOURS", 8) if has_app_context() else 8
    now = utcnow() + timedelta(hours=hours)
    return now.strftime("%Y-%m-%d %H:%M:%S")

def api_ok(message, data=None):
    return {
        "status": True,
        "message": message,
        "data": {
            **(data or {}),
            "API_TIME_HUMAN": _api_time_human()
        }
    }

def api_error(message, data=None):
    return {
        "status": False,
        "message": message,
        "data": {
            **(data or {}),
            "API_TIME_HUMAN": _api_time_human()
        }
    }
