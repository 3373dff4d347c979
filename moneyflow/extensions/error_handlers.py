from flask import Flask, Response
from werkzeug.exceptions import HTTPException

from moneyflow.controllers.response_contract import compat_error_response
from moneyflow.exceptions import APIError
from moneyflow.utils.response_builder import INTERNAL_ERROR_CODE


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(APIError)  # type: ignore[misc]
    def handle_api_error(e: APIError) -> Response:
        return compat_error_response(
            legacy_payload={"error": e.message, "details": e.details},
            status_code=e.status_code,
            message=e.message,
            error_code=e.code,
            details=e.details,
        )

    @app.errorhandler(HTTPException)  # type: ignore[misc]
    def handle_http_exception(e: HTTPException) -> Response:
        status_code = e.code or 500
        return compat_error_response(
            legacy_payload={"error": e.name, "message": e.description},
            status_code=status_code,
            message=e.description or e.name,
            error_code=e.name.upper().replace(" ", "_"),
        )

    @app.errorhandler(Exception)  # type: ignore[misc]
    def handle_generic_exception(e: Exception) -> Response:
        app.logger.exception("Unhandled exception: %s", e)
        return compat_error_response(
            legacy_payload={"error": "Internal server error"},
            status_code=500,
            message="An unexpected error occurred.",
            error_code=INTERNAL_ERROR_CODE,
        )
