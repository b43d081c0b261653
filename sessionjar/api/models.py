from __future__ import annotations


# --- Exceptions ---

class SessionJarError(Exception):
    def __init__(
        self,
        message: str,
        code: str,
        path: str | None = None,
        userMessage: str | None = None,
    ):
        self.message = message
        self.code = code
        self.path = path
        self.userMessage = userMessage or message
        super().__init__(message)


class AuthenticationError(SessionJarError):
    def __init__(self, message: str = "Authentication failed"):
        super().__init__(
            message=message,
            code="AuthenticationException",
            userMessage="Not signed in or session expired. Sign in again.",
        )


class SnapshotDecodeError(SessionJarError, ValueError):
    """Stored cookie snapshot text is not a JSON object."""

    def __init__(self, message: str = "Invalid cookie snapshot"):
        super().__init__(
            message=message,
            code="SnapshotDecodeException",
            userMessage="Stored cookies are corrupted. Run: sessionjar clear",
        )
