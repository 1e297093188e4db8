from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

from csms.auth.security import (
    SESSION_COOKIE,
    authenticate,
    clear_session_cookie,
    make_access_token,
    set_session_cookie,
    verify_access_token,
)


router = APIRouter()


class LoginBody(BaseModel):
    username: str
    password: str


def token_from_request(request: Request) -> str:
    """Bearer header first, then the access_token cookie."""
    header = request.headers.get("authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip()
    return request.cookies.get(SESSION_COOKIE) or ""


@router.post("/auth/login", tags=["auth"])
def login(body: LoginBody, response: Response):
    if not authenticate(body.username.strip(), body.password):
        raise HTTPException(status_code=401, detail="잘못된 사용자 이름 또는 비밀번호입니다.")

    access = make_access_token(body.username.strip())
    set_session_cookie(response, access)
    return {"token": access, "user": {"username": body.username.strip()}}


@router.post("/auth/logout", tags=["auth"])
def logout(response: Response):
    clear_session_cookie(response)
    return {"ok": True}


@router.get("/auth/me", tags=["auth"])
def me(request: Request):
    username = verify_access_token(token_from_request(request))
    if not username:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return {"username": username}
