"""Legacy/v2 response envelopes, selected by the ``X-API-Contract`` header."""

from __future__ import annotations

from typing import Any

from flask import Response, has_request_context, request

from moneyflow.utils.response_builder import error_payload, json_response, success_payload

CONTRACT_HEADER = "X-API-Contract"
CONTRACT_V2 = "v2"


def is_v2_contract() -> bool:
    if not has_request_context():
        return False
    header_value = str(request.headers.get(CONTRACT_HEADER, "")).strip().lower()
    return header_value == CONTRACT_V2


def compat_success_response(
    *,
    legacy_payload: dict[str, Any],
    status_code: int,
    message: str,
    data: dict[str, Any],
    meta: dict[str, Any] | None = None,
) -> Response:
    payload = legacy_payload
    if is_v2_contract():
        payload = success_payload(message=message, data=data, meta=meta)
    return json_response(payload, status_code=status_code)


def compat_error_response(
    *,
    legacy_payload: dict[str, Any],
    status_code: int,
    message: str,
    error_code: str,
    details: dict[str, Any] | None = None,
) -> Response:
    payload = legacy_payload
    if is_v2_contract():
        payload = error_payload(message=message, code=error_code, details=details)
    return json_response(payload, status_code=status_code)


__all__ = [
    "CONTRACT_HEADER",
    "CONTRACT_V2",
    "is_v2_contract",
    "compat_success_response",
    "compat_error_response",
]
