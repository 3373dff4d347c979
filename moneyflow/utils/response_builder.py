import os
from typing import Any, Dict, Optional

from flask import Response, current_app, has_app_context, jsonify

INTERNAL_ERROR_CODE = "INTERNAL_ERROR"


def _is_debug_or_testing() -> bool:
    if has_app_context():
        return bool(
            current_app.config.get("DEBUG") or current_app.config.get("TESTING")
        )
    return os.getenv("FLASK_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def success_payload(
    message: str,
    data: Any = None,
    meta: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "success": True,
        "message": message,
        "data": data,
    }
    if meta is not None:
        payload["meta"] = meta
    return payload


def error_payload(
    message: str,
    code: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    # Internal failures never expose their details outside debug/testing.
    if code == INTERNAL_ERROR_CODE and not _is_debug_or_testing():
        sanitized_details: Dict[str, Any] = {}
    else:
        sanitized_details = details or {}

    return {
        "success": False,
        "message": message,
        "error": {
            "code": code,
            "details": sanitized_details,
        },
    }


def json_response(payload: Dict[str, Any], status_code: int) -> Response:
    response = jsonify(payload)
    response.status_code = status_code
    return response
