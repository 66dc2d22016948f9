from fastapi import Depends, Header, HTTPException, status

from red2blue.services.auth_service import decode_token
from red2blue.services.store import store

STAFF_ROLES = {"coach", "admin"}


def get_current_user(authorization: str = Header(default="")) -> dict:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    try:
        payload = decode_token(token, expected_type="access")
        user_id = int(payload.get("sub", ""))
    except Exception as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token") from exc
    user = store.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def require_coach(current_user: dict = Depends(get_current_user)) -> dict:
    if current_user["role"] not in STAFF_ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Coach access required")
    return current_user


def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    if current_user["role"] != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


def ensure_can_access(current_user: dict, user_id: int) -> None:
    """Students may only touch their own records; coaches and admins may read anyone's."""
    if current_user["role"] in STAFF_ROLES:
        return
    if int(current_user["id"]) != int(user_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to access this user")
