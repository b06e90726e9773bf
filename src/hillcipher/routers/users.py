from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlmodel import Session, select

from hillcipher.core.verify import hash_password, issue_token, password_verify
from hillcipher.models.requests import LoginResponse, RegisterResponse, UserCredentials
from hillcipher.models.schema import AuthToken, User
from hillcipher.shared import Logger
from hillcipher.shared.db import get_session
from hillcipher.shared.http import bearer_token, current_user

logger = Logger(__name__).get_logger()

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/register", response_model=RegisterResponse)
def register(
    data: UserCredentials,
    session: Annotated[Session, Depends(get_session)],
):
    """
    runs in the threadpool: the scrypt KDF is CPU bound
    check the username is unique -> reject with 403 if not
    hash the password with scrypt and a fresh salt
    persist to db
    """
    logger.debug("Registering user %s", data.username)

    existing_user = session.exec(
        select(User).where(User.username == data.username)
    ).first()
    if existing_user:
        raise HTTPException(status_code=403, detail="Username already exists")

    password_hash, password_salt = hash_password(data.password)
    new_user = User(
        username=data.username,
        password_hash=password_hash,
        password_salt=password_salt,
    )
    session.add(new_user)
    session.commit()
    session.refresh(new_user)

    logger.info("Registered user %s", new_user.username)
    return RegisterResponse(id=new_user.id, username=new_user.username)


@router.post("/login", response_model=LoginResponse)
def login(
    data: UserCredentials,
    session: Annotated[Session, Depends(get_session)],
):
    user = session.exec(select(User).where(User.username == data.username)).first()
    if user is None:
        logger.warning("Login attempt for unknown user %s", data.username)
        raise HTTPException(status_code=401, detail="Invalid username or password")

    password_verify(data.password, user.password_hash, user.password_salt)

    token, expires_at = issue_token()
    session.add(AuthToken(token=token, f_username=user.username, expires_at=expires_at))
    session.commit()

    logger.info("Issued token for %s, expires %s", user.username, expires_at)
    return LoginResponse(token=token, expires_at=expires_at)


@router.post("/logout")
async def logout(
    user: Annotated[User, Depends(current_user)],
    token: Annotated[str, Depends(bearer_token)],
    session: Annotated[Session, Depends(get_session)],
):
    auth_token = session.exec(select(AuthToken).where(AuthToken.token == token)).first()
    if auth_token is not None:
        session.delete(auth_token)
        session.commit()

    logger.info("Logged out %s", user.username)
    return JSONResponse(content={"message": "Logged out"})
