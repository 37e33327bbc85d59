class SocialHubError(Exception):
    """Base class for errors surfaced to the user."""


class AuthError(SocialHubError):
    """Bad credentials or a failed sign-up; shown inline on the form."""


class UsernameTakenError(AuthError):
    def __init__(self, username: str):
        super().__init__("Username already taken. Please choose another one.")
        self.username = username


class NotAuthenticatedError(SocialHubError):
    """No active session; the page redirects to a login view."""


class ForbiddenError(SocialHubError):
    """Signed in, but not allowed on an admin surface."""


class MutationError(SocialHubError):
    """A write failed; surfaced as a blocking alert and not retried."""


def error_message(err: Exception) -> str:
    """Human-readable text of a backend error (gotrue/postgrest errors carry .message)."""
    return str(getattr(err, "message", "") or err)
