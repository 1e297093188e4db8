import os
import time
from typing import Optional

import jwt
from fastapi import Response
from passlib.context import CryptContext


JWT_SECRET = os.getenv("JWT_SECRET", "change-me-please")
JWT_ALG = os.getenv("JWT_ALG", "HS256")
ACCESS_TTL = int(os.getenv("JWT_ACCESS_TTL", "900"))  # 15min

SESSION_COOKIE = "access_token"
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"

# Single operator account; only the hash is kept in memory
AUTH_USERNAME = os.getenv("AUTH_USERNAME", "admin")
_crypt = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
_operator_hash = _crypt.hash(os.getenv("AUTH_PASSWORD", "admin1"))


def authenticate(username: str, password: str) -> bool:
    if username != AUTH_USERNAME:
        return False
    try:
        return _crypt.verify(password, _operator_hash)
    except (ValueError, TypeError):
        return False


def make_access_token(username: str) -> str:
    issued = int(time.time())
    claims = {"sub": username, "iat": issued, "exp": issued + ACCESS_TTL, "scope": "access"}
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALG)


def verify_access_token(token: str) -> Optional[str]:
    """Operator name carried by a valid, unexpired access token, else None."""
    if not token:
        return None
    try:
        claims = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])
    except jwt.PyJWTError:
        return None
    if claims.get("scope") != "access":
        return None
    return claims.get("sub")


def set_session_cookie(response: Response, token: str):
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=ACCESS_TTL,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response):
    response.delete_cookie(SESSION_COOKIE, path="/")
