"""Auth-specific errors."""


class AuthenticationError(Exception):
    """Raised when the backend rejects a sign-in or session operation.

    The message comes from the backend (e.g. "Invalid login credentials")
    and is safe to show to the user; credentials are never part of it.
    """
