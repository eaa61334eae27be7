import logging
from typing import Optional

from fastapi import Depends, HTTPException
from starlette import status

from recipebox.lib.authentication import UserData, get_current_user
from recipebox.lib.logging.context import logging_context

logger = logging.getLogger(__name__)


async def require_current_user(
    user_data: Optional[UserData] = Depends(get_current_user),
) -> UserData:
    if user_data is None:
        logger.info(msg="Non-authenticated user attempted to access protected route.", extra=logging_context())
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

    return user_data
