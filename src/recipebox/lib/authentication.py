import logging
import os
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import APIKeyHeader, APIKeyQuery, HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from recipebox import deps
from recipebox.lib.logging.context import (
    SHARE_TOKEN_HEADER,
    SHARE_TOKEN_QUERY_PARAM,
    format_raised_exception_info_as_dict,
    logging_context,
    save_to_logging_context,
)
from recipebox.models.user import User

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE")

logger = logging.getLogger(__name__)


class AuthenticationMethod(str, Enum):
    jwt = "jwt"


@dataclass
class UserData:
    user: User


####################################################################################################
# JWT authentication
####################################################################################################


def decode_jwt(token: str) -> dict:
    if not JWT_SECRET_KEY:
        # An empty HS256 key would let anyone sign tokens for any user.
        logger.error(msg="Refusing to authenticate user; JWT_SECRET_KEY is not configured.", extra=logging_context())
        return {}

    try:
        return jwt.decode(
            token,
            JWT_SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
            options={"verify_aud": JWT_AUDIENCE is not None},
        )
    except JWTError as ex:
        save_to_logging_context(format_raised_exception_info_as_dict(ex))
        logger.debug(msg="Failed to authenticate user; Could not decode user token.", extra=logging_context())
        return {}


class JWTBearer(HTTPBearer):
    def __init__(self, auto_error: bool = True):
        super(JWTBearer, self).__init__(auto_error=auto_error)

    async def __call__(self, request: Request):
        credentials: Optional[HTTPAuthorizationCredentials]
        try:
            credentials = await super(JWTBearer, self).__call__(request)
        except HTTPException:
            credentials = None

        if not credentials:
            logger.debug(msg="No bearer credentials were provided.", extra=logging_context())
            return None

        if not credentials.scheme == "Bearer":
            save_to_logging_context({"scheme": credentials.scheme})
            logger.info(msg="Failed to authenticate user; Invalid authentication scheme.", extra=logging_context())
            raise HTTPException(status_code=403, detail="Invalid authentication scheme.")

        token_payload = decode_jwt(credentials.credentials)
        if not token_payload:
            logger.info(msg="Failed to authenticate user; Invalid or expired token.", extra=logging_context())
            raise HTTPException(status_code=403, detail="Invalid token or expired token.")

        logger.debug(msg="Successfully acquired JWT.", extra=logging_context())
        return token_payload


####################################################################################################
# Share links
####################################################################################################

share_token_header = APIKeyHeader(name=SHARE_TOKEN_HEADER, auto_error=False)
share_token_query = APIKeyQuery(name=SHARE_TOKEN_QUERY_PARAM, auto_error=False)


async def get_share_token(
    header_token: Optional[str] = Security(share_token_header),
    query_token: Optional[str] = Security(share_token_query),
) -> Optional[str]:
    """The bearer token of a share link presented with this request, if any."""
    return header_token or query_token


####################################################################################################
# Main authentication methods
####################################################################################################


async def get_current_user(
    token_payload: Optional[dict] = Depends(JWTBearer(auto_error=False)),
    db: Session = Depends(deps.get_db),
) -> Optional[UserData]:
    if token_payload is None:
        save_to_logging_context({"auth_method": None, "user_authenticated": False})
        logger.info(msg="Request is anonymous; No JWT was presented.", extra=logging_context())
        return None

    save_to_logging_context({"auth_method": AuthenticationMethod.jwt})

    username: Optional[str] = token_payload.get("sub")
    if username is None:
        save_to_logging_context({"user_authenticated": False})
        logger.info(msg="Failed to authenticate user; Username not present in token payload.", extra=logging_context())
        return None

    user = db.query(User).filter(User.username == username).one_or_none()

    # First sign-in through the identity provider creates the account.
    if user is None:
        user = User(
            username=username,
            is_active=True,
            first_name=token_payload.get("given_name"),
            last_name=token_payload.get("family_name"),
            email=token_payload.get("email"),
            date_joined=datetime.now(),
            is_first_login=True,
        )
        logger.debug(msg="Created new user.", extra=logging_context())

    elif not user.is_active:
        save_to_logging_context({"user": user.id, "user_authenticated": False})
        logger.info(msg="Failed to authenticate user; User is inactive.", extra=logging_context())
        return None

    else:
        user.is_first_login = False

    user.last_login = datetime.now()
    db.add(user)
    db.commit()
    db.refresh(user)

    save_to_logging_context({"user": user.id, "first_login": user.is_first_login, "user_authenticated": True})
    logger.info(msg="Successfully authenticated user via JWT.", extra=logging_context())
    return UserData(user)
