"""Error taxonomy and user-facing error messages.

Every remote failure is converted into one of these types at the gateway
boundary, then into a human-readable sentence by ``describe_error`` before it
reaches the notification channel.
"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class TourdeskError(Exception):
    """Base class for all application errors."""


class GatewayError(TourdeskError):
    """A call to the remote API failed.

    Attributes:
        status_code: HTTP status code, or None for transport failures
        server_message: ``message`` field of a JSON error body, if any
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        server_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message

    @classmethod
    def from_response(cls, response: httpx.Response) -> "GatewayError":
        """Build an error from a non-2xx response, keeping the server's message."""
        server_message = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            server_message = body["message"]
        return cls(
            f"{response.request.method} {response.request.url.path} "
            f"failed with status {response.status_code}",
            status_code=response.status_code,
            server_message=server_message,
        )

    @classmethod
    def from_transport(cls, exc: httpx.HTTPError) -> "GatewayError":
        """Build an error from a transport-level failure (no response)."""
        return cls(f"Transport error: {exc}")


class FetchError(TourdeskError):
    """Loading a collection failed. The previous collection is kept."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class MutationError(TourdeskError):
    """A delete, bulk delete, status change or save failed.

    The collection is left unchanged when this is raised.
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class ValidationError(TourdeskError):
    """A create/edit form was submitted with invalid fields.

    Attributes:
        errors: Mapping of field name to the message shown next to that field
    """

    def __init__(self, errors: dict[str, str]):
        summary = ", ".join(f"{k}: {v}" for k, v in errors.items())
        super().__init__(f"Invalid form: {summary}")
        self.errors = errors


def _root_cause(exception: Exception) -> Exception:
    cause = getattr(exception, "cause", None)
    while isinstance(cause, Exception):
        exception = cause
        cause = getattr(exception, "cause", None)
    return exception


def describe_error(exception: Exception) -> str:
    """Get a user-friendly message for an exception.

    Args:
        exception: Any error raised by a gateway, store or form

    Returns:
        Human-readable error message
    """
    if isinstance(exception, ValidationError):
        return "Please correct the highlighted fields."

    root = _root_cause(exception)

    if isinstance(root, GatewayError):
        if root.server_message:
            return root.server_message
        if root.status_code in (401, 419):
            return "Your session has expired. Please sign in again."
        if root.status_code == 403:
            return "You do not have permission to perform this action."
        if root.status_code == 404:
            return "The record no longer exists. Please refresh and try again."
        if root.status_code is not None and root.status_code >= 500:
            return "The server encountered an error. Please try again."

    error_msg = str(root).lower()

    if "timeout" in error_msg or "timed out" in error_msg:
        return "The server took too long to respond. Please try again."

    if any(x in error_msg for x in ("connect", "network", "refused", "reset", "transport")):
        return "Unable to connect to the server. Please check your internet connection."

    if "not supported" in error_msg:
        return "This action is not available for this screen."

    logger.debug(f"No specific message for {type(root).__name__}: {root}")
    return "Something went wrong. Please try again."
