from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class APIError(HTTPException):
    def __init__(self, status_code: int, code: str, message: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.extra = extra


class InvalidFieldsError(APIError):
    def __init__(self, message: str = "Invalid fields"):
        super().__init__(status.HTTP_400_BAD_REQUEST, "INVALID_FIELDS", message)


class MissingFieldError(APIError):
    def __init__(self, message: str = "Destination required"):
        super().__init__(status.HTTP_400_BAD_REQUEST, "MISSING_FIELD", message)


class InvalidInputError(APIError):
    def __init__(self, message: str = "messages array required"):
        super().__init__(status.HTTP_400_BAD_REQUEST, "INVALID_INPUT", message)


class NotFoundError(APIError):
    def __init__(self, message: str = "Not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, "NOT_FOUND", message)


class ForbiddenError(APIError):
    def __init__(self, message: str = "Not authorized"):
        super().__init__(status.HTTP_403_FORBIDDEN, "FORBIDDEN", message)


class UpstreamEmptyError(APIError):
    def __init__(self, message: str = "No response from model"):
        super().__init__(status.HTTP_502_BAD_GATEWAY, "UPSTREAM_EMPTY", message)


class UpstreamTimeoutError(APIError):
    def __init__(self, message: str = "Model request timed out"):
        super().__init__(status.HTTP_504_GATEWAY_TIMEOUT, "UPSTREAM_TIMEOUT", message)


class ParseFailureError(APIError):
    """Model text that could not be coerced into a JSON object, even after repair."""

    def __init__(self, raw: str, message: str = "Model output not valid JSON"):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, "PARSE_FAILURE", message, {"raw": raw})
        self.raw = raw


class InternalError(APIError):
    def __init__(self, message: str = "Internal server error"):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", message)


def error_content(message: str, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    content: Dict[str, Any] = {"error": message}
    if extra:
        content.update(extra)
    return content
