"""Error taxonomy for uploads and image edit requests."""

from enum import Enum

import httpx
from google.genai import errors as genai_errors


class ErrorCategory(str, Enum):
    """User-facing classes of edit failures."""

    CREDENTIAL = "credential"
    NETWORK = "network"
    UNSUPPORTED_IMAGE = "unsupported_image"
    SAFETY = "safety"
    BAD_REQUEST = "bad_request"
    SERVICE = "service"
    GENERIC = "generic"
    NO_IMAGE = "no_image"


ERROR_MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.CREDENTIAL: (
        "The API key is invalid or missing. Please make sure it is configured correctly."
    ),
    ErrorCategory.NETWORK: (
        "Network error. Please check your internet connection and try again."
    ),
    ErrorCategory.UNSUPPORTED_IMAGE: (
        "The image format is not supported or the file is corrupted. "
        "Please try a different image."
    ),
    ErrorCategory.SAFETY: (
        "Your request was blocked for safety reasons. "
        "Please adjust the prompt or use a different image."
    ),
    ErrorCategory.BAD_REQUEST: (
        "The request was invalid. Please check your image and prompt."
    ),
    ErrorCategory.SERVICE: (
        "The service is having problems. Please try again in a few minutes."
    ),
    ErrorCategory.GENERIC: (
        "An unexpected error occurred while processing your image. Please try again."
    ),
    ErrorCategory.NO_IMAGE: (
        "Could not generate the image. Please try again with a different image or prompt."
    ),
}

# Checked in order; the first matching group wins.
_MESSAGE_PATTERNS: list[tuple[tuple[str, ...], ErrorCategory]] = [
    (("api key",), ErrorCategory.CREDENTIAL),
    (("network", "failed to fetch"), ErrorCategory.NETWORK),
    (("image", "mime_type"), ErrorCategory.UNSUPPORTED_IMAGE),
    (("safety", "blocked"), ErrorCategory.SAFETY),
    (("400",), ErrorCategory.BAD_REQUEST),
    (("500",), ErrorCategory.SERVICE),
]


class UploadRejected(ValueError):
    """Uploaded file failed type, size or decode validation."""


class EditError(Exception):
    """Raised by editor backends for failures detected before or after the call."""


class SafetyBlocked(EditError):
    """The provider refused the request on safety grounds."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Request blocked by safety filters: {reason}")
        self.reason = reason


class UnknownEditorBackend(ValueError):
    """Configured editor backend name is not registered."""


class EditFailed(Exception):
    """An edit request failed and was classified for the user."""

    def __init__(self, category: ErrorCategory, message: str | None = None) -> None:
        self.category = category
        self.message = message or ERROR_MESSAGES[category]
        super().__init__(self.message)


def _classify_by_code(exc: BaseException) -> ErrorCategory | None:
    if isinstance(exc, SafetyBlocked):
        return ErrorCategory.SAFETY
    if isinstance(exc, httpx.TransportError):
        return ErrorCategory.NETWORK
    if isinstance(exc, genai_errors.APIError):
        if exc.code in (401, 403):
            return ErrorCategory.CREDENTIAL
        if exc.code is not None and exc.code >= 500:
            return ErrorCategory.SERVICE
    return None


def _classify_by_message(exc: BaseException) -> ErrorCategory:
    message = str(exc).lower()
    for needles, category in _MESSAGE_PATTERNS:
        if any(needle in message for needle in needles):
            return category
    return ErrorCategory.GENERIC


def classify_error(exc: BaseException) -> ErrorCategory:
    """Map an upstream exception to a user-facing category.

    Safety blocks, structured status codes and transport errors are trusted
    by type first. Otherwise
    the exception text is matched against known substrings, which is
    best-effort and depends on the provider's wording.
    """
    return _classify_by_code(exc) or _classify_by_message(exc)
