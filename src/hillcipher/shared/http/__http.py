import logging
from contextlib import contextmanager
from typing import Annotated

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session, select

from hillcipher.core.errors import HillCipherError
from hillcipher.core.repository import TextRepository
from hillcipher.models.schema import AuthToken, User
from hillcipher.shared import Logger
from hillcipher.shared.db import get_session

__all__ = ["bearer_token", "current_user", "server_error_handler", "text_repository"]

logger = Logger(__name__, level=logging.DEBUG).get_logger()

bearer_scheme = HTTPBearer(auto_error=False)


@contextmanager
def server_error_handler(stacklevel=1):
    """Translate exceptions raised inside the block into HTTP errors.

    HTTPExceptions pass through, cipher errors become 400 and anything else
    is logged and reported as 500.
    """
    # Go 3 levels up to escape @contextmanager methods and current function
    stack_level = 2 + stacklevel
    kw = {"stacklevel": stack_level}
    try:
        yield

    except HTTPException:
        raise

    except HillCipherError as e:
        logger.info("Rejected cipher request: %s", e, **kw)
        raise HTTPException(status_code=400, detail=str(e)) from e

    except Exception as e:
        logger.error("Failed to process request: %s", e, **kw)
        raise HTTPException(status_code=500, detail=str(e)) from e


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=401,
        detail="Missing or invalid bearer token",
        headers={"WWW-Authenticate": "Bearer"},
    )


def bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized()
    return credentials.credentials


def current_user(
    token: Annotated[str, Depends(bearer_token)],
    session: Annotated[Session, Depends(get_session)],
) -> User:
    unauthorized = _unauthorized()

    auth_token = session.exec(select(AuthToken).where(AuthToken.token == token)).first()
    if auth_token is None:
        logger.warning("Unknown bearer token presented")
        raise unauthorized

    if auth_token.expired:
        logger.info("Expired token for %s removed", auth_token.f_username)
        session.delete(auth_token)
        session.commit()
        raise unauthorized

    user = session.exec(select(User).where(User.username == auth_token.f_username)).first()
    if user is None:
        raise unauthorized
    return user


def text_repository(
    user: Annotated[User, Depends(current_user)],
    session: Annotated[Session, Depends(get_session)],
) -> TextRepository:
    return TextRepository(session, user.username)
