# storefront/utils/parsing.py
from __future__ import annotations
from datetime import datetime, timezone
from flask import current_app, request


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def parse_bool(v, default=False):
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    return str(v).strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_int(v, default=0):
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def parse_opt_int(v):
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, float) and not v.is_integer():
        return None
    if isinstance(v, str) and v.strip().lower() in {"", "null"}:
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def parse_opt_float(v):
    if v is None: return None
    if isinstance(v, str) and v.strip() == "": return None
    try: return float(v)
    except (TypeError, ValueError): return None


def parse_iso8601(s):
    """ISO-8601 -> naive UTC datetime. Returns None when blank or unparseable."""
    if not s or not isinstance(s, str):
        return None
    s = s.strip()
    # support trailing 'Z' (UTC)
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)  # store naive UTC
    return dt


def clean_str(v):
    if v is None:
        return None
    return str(v).strip()


def paginate(query, page=None, per_page=None):
    default_pp = current_app.config.get("DEFAULT_PER_PAGE", 15)
    max_pp = current_app.config.get("MAX_PER_PAGE", 100)
    page = max(parse_int(page if page is not None else request.args.get("page"), 1), 1)
    per_page = parse_int(per_page if per_page is not None else request.args.get("per_page"), default_pp)
    per_page = min(max(per_page, 1), max_pp)
    items = query.paginate(page=page, per_page=per_page, error_out=False)
    return {
        "meta": {
            "page": items.page,
            "pages": items.pages or 1,
            "per_page": per_page,
            "total": items.total,
        },
        "items": items.items,
    }
