import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ecohub.auth import jwt_handler
from ecohub.core.errors import UnauthenticatedError
from ecohub.database import get_db
from ecohub.models.user import User

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise UnauthenticatedError("Access token required")

    try:
        payload = jwt_handler.decode_access_token(credentials.credentials)
    except jwt.InvalidTokenError as exc:
        raise UnauthenticatedError("Invalid token") from exc

    subject = payload.get("sub")
    if not subject or not str(subject).isdigit():
        raise UnauthenticatedError("Invalid token subject")

    user = db.get(User, int(subject))
    if user is None:
        raise UnauthenticatedError("User not found")
    return user
