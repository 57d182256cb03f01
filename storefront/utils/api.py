# --- storefront/utils/api.py ---
from datetime import datetime, timezone
from flask import jsonify


def _api_time():
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def api_ok(message, data=None, **extra):
    return {
        "status": True,
        "message": message,
        **extra,
        "data": {
            **(data or {}),
            "API_TIME_HUMAN": _api_time(),
        },
    }


def api_error(message, data=None, **extra):
    return {
        "status": False,
        "message": message,
        **extra,
        "data": {
            **(data or {}),
            "API_TIME_HUMAN": _api_time(),
        },
    }


# ---- standard API response format ------------------------------------------
def ok(msg, data=None, status=200, **extra):
    """``extra`` keys are placed next to ``status``/``message`` at top level."""
    r = jsonify(api_ok(msg, data, **extra)); r.status_code = status; return r


def err(msg, status=400, data=None, **extra):
    r = jsonify(api_error(msg, data, **extra)); r.status_code = status; return r


def page_payload(key, page_data, serialize):
    return {
        key: [serialize(x) for x in page_data["items"]],
        "meta": page_data["meta"],
    }
