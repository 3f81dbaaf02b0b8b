"""Identity provider: JWT issue and verification.

Login and refresh flows belong to the external identity service. This
module only issues tokens for known users and turns a bearer token into
an explicit Principal.
"""

from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from docflow.core.approval.deadlines import utcnow
from docflow.core.config import get_settings
from docflow.core.errors import AuthenticationError
from docflow.core.principal import Principal, Role
from docflow.db.models import User

settings = get_settings()


def create_access_token(
    user: User,
    expires_delta: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> str:
    """Create a signed JWT access token for a user."""
    issued = now or utcnow()
    if expires_delta:
        expire = issued + expires_delta
    else:
        expire = issued + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = {
        "sub": str(user.id),
        "role": user.role,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def authenticate(token: Optional[str], db: Session) -> Principal:
    """
    Resolve a bearer token into a Principal.

    The role is taken from the stored user, not the token claims, so a role
    change takes effect without reissuing tokens.

    Raises:
        AuthenticationError: If the token is missing, invalid, expired or
            refers to an unknown user
    """
    if not token:
        raise AuthenticationError()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise AuthenticationError() from None

    subject = payload.get("sub")
    if subject is None or payload.get("type") != "access":
        raise AuthenticationError()
    try:
        user_id = int(subject)
    except ValueError:
        raise AuthenticationError() from None

    user = db.get(User, user_id)
    if user is None:
        raise AuthenticationError()
    try:
        role = Role(user.role)
    except ValueError:
        raise AuthenticationError(f"Unknown role for user {user_id}") from None
    return Principal(id=user.id, role=role)
