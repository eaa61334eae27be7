class PermissionException(Exception):
    def __init__(self, http_code: int, message: str):
        super().__init__(message)
        self.http_code = http_code
        self.message = message


class Denied(PermissionException):
    """Raised by :func:`recipebox.lib.permissions.core.authorize` when the effective level is insufficient."""

    pass
