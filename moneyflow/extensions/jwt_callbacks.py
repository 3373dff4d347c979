from typing import Any, Dict

from flask import jsonify
from flask_jwt_extended import JWTManager


def register_jwt_callbacks(jwt: JWTManager) -> None:
    # Sessions live with the external auth provider, so every token problem is a 401.
    @jwt.invalid_token_loader  # type: ignore[misc]
    def invalid_token_callback(error: str) -> Any:
        return jsonify({"error": "Invalid token"}), 401

    @jwt.expired_token_loader  # type: ignore[misc]
    def expired_token_callback(
        jwt_header: Dict[str, Any], jwt_payload: Dict[str, Any]
    ) -> Any:
        return jsonify({"error": "Token expired"}), 401

    @jwt.unauthorized_loader  # type: ignore[misc]
    def missing_token_callback(error: str) -> Any:
        return jsonify({"error": "Unauthorized"}), 401
