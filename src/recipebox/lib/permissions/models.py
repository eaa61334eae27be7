import logging
from typing import Optional

from recipebox.lib.logging.context import logging_context, save_to_logging_context

logger = logging.getLogger(__name__)


class PermissionResponse:
    def __init__(self, permitted: bool, http_code: int = 403, message: Optional[str] = None):
        self.permitted = permitted
        self.http_code = http_code if not permitted else None
        self.message = message if not permitted else None

        save_to_logging_context({"permission_message": self.message, "access_permitted": self.permitted})
        logger.debug(
            msg=f"Access to the requested resource is {'' if self.permitted else 'not '}permitted.",
            extra=logging_context(),
        )

    def __bool__(self) -> bool:
        return self.permitted
