from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database.db import get_db, store
from dependencies.security import bearer_token, get_current_user, require_student
from schemas.auth import CurrentUser, LoginRequest, LoginResponse
from schemas.common import ok
from schemas.students import PasswordChange
from services import student_service
from services.auth_service import authenticate, tokens

router = APIRouter(prefix="/auth", tags=["auth"])


# ✅ [LOGIN] works in local mode too
@router.post("/login")
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate(db, request.username, request.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Identifiants incorrects")
    token = tokens.issue(user)
    return LoginResponse(token=token, **user.model_dump()).dump() | {"dbStatus": store.status}


# ✅ [LOGOUT]
@router.post("/logout")
def logout(token: str = Depends(bearer_token)):
    tokens.revoke(token)
    return ok(message="Déconnecté")


# ✅ [ME] current user
@router.get("/me")
def me(user: CurrentUser = Depends(get_current_user)):
    return ok(user.dump())


# ✅ [PASSWORD] replaces the temporary password
@router.post("/change-password")
def change_password(
    payload: PasswordChange,
    user: CurrentUser = Depends(require_student),
    db: Session = Depends(get_db),
):
    student = student_service.get_student(db, user.id)
    student_service.change_password(db, student, payload.current_password, payload.new_password)
    return ok({"passwordChanged": True}, "Mot de passe modifié")
