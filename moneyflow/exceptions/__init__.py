from .api_exceptions import APIError, UnauthorizedAPIError, ValidationAPIError

__all__ = [
    "APIError",
    "ValidationAPIError",
    "UnauthorizedAPIError",
]
