from typing import Optional, Annotated
from fastapi import Depends, Header, HTTPException
from schemas.auth import CurrentUser
from services.auth_service import tokens

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]


def bearer_token(authorization: AuthHeader = None) -> str:
    if not authorization:
        raise HTTPException(
            status_code=401,
            detail="Missing Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # "Bearer <token>"
    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        raise HTTPException(
            status_code=401,
            detail="Invalid Authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if scheme.lower() != "bearer":
        raise HTTPException(
            status_code=401,
            detail="Invalid auth scheme",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token.strip()


def get_current_user(token: str = Depends(bearer_token)) -> CurrentUser:
    user = tokens.resolve(token)
    if user is None:
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if user.type != "admin":
        raise HTTPException(status_code=403, detail="Réservé aux instructeurs")
    return user


def require_student(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if user.type != "student":
        raise HTTPException(status_code=403, detail="Réservé aux élèves")
    return user
