# payrecon/utils/api.py
from datetime import datetime, timezone

from flask import jsonify


def envelope(status: bool, message, data=None) -> dict:
    """{"status", "message", "data"} body; data always carries the server time."""
    body = dict(data or {})
    body["API_TIME_HUMAN"] = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
    return {"status": status, "message": message, "data": body}


def _respond(status: bool, msg, data, code):
    r = jsonify(envelope(status, msg, data))
    r.status_code = code
    return r


def ok(msg, data=None, status=200):
    return _respond(True, msg, data, status)


def err(msg, status=400, data=None):
    return _respond(False, msg, data, status)
