from typing import Any, Dict, Optional


class APIError(Exception):
    def __init__(
        self,
        message: str,
        *,
        code: str = "BAD_REQUEST",
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}


class ValidationAPIError(APIError):
    def __init__(
        self,
        message: str = "Validation error",
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            code="VALIDATION_ERROR",
            status_code=400,
            details=details,
        )


class UnauthorizedAPIError(APIError):
    def __init__(
        self,
        message: str = "Unauthorized",
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            code="UNAUTHORIZED",
            status_code=401,
            details=details,
        )
