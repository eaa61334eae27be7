class NonexistentResourceError(ValueError):
    """Raised when a requested recipe, binder, user or link does not exist."""

    pass


class ShareError(Exception):
    """Base class for rejected share, revoke and link operations."""

    http_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ShareForbidden(ShareError):
    """The acting subject does not hold admin on the resource being shared."""

    http_code = 403


class InvalidGrantee(ShareError):
    """The grantee is the resource owner, or does not exist."""

    pass


class InvalidLevel(ShareError):
    """The requested level exceeds the acting subject's own effective level."""

    pass


class InvalidExpiry(ShareError):
    """A share link was requested with an expiry that has already passed."""

    pass


class StorageUnavailable(Exception):
    """The storage layer failed; the operation was rolled back and may be retried by the caller."""

    pass
