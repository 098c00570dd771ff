from datetime import datetime, timedelta
from typing import Optional, Set
from jose import JWTError, jwt
from passlib.context import CryptContext
from social_tracker.core.config import settings
import hashlib
import threading
import uuid

# Configure bcrypt - we handle the 72-byte limit manually in get_password_hash()
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto"
)

# In-memory token blacklist (single process)
_token_blacklist: Set[str] = set()
_blacklist_lock = threading.Lock()


def _truncate_password(password: str) -> str:
    """Bcrypt has a hard limit of 72 bytes; truncate without breaking UTF-8."""
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > 72:
        password = password_bytes[:72].decode('utf-8', errors='ignore')
    return password


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash"""
    return pwd_context.verify(_truncate_password(plain_password), hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt (truncates to 72 bytes as required)"""
    return pwd_context.hash(_truncate_password(password))


def _create_token(data: dict, token_type: str, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + expires_delta
    # jti keeps tokens issued within the same second distinct for blacklisting
    to_encode.update({"exp": expire, "type": token_type, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm="HS256")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    return _create_token(
        data,
        "access",
        expires_delta or timedelta(seconds=settings.access_token_expires),
    )


def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT refresh token"""
    return _create_token(
        data,
        "refresh",
        expires_delta or timedelta(seconds=settings.refresh_token_expires),
    )


def _get_token_hash(token: str) -> str:
    """Generate a hash of the token for blacklist storage"""
    return hashlib.sha256(token.encode()).hexdigest()


def blacklist_token(token: str) -> None:
    """Add token to blacklist"""
    token_hash = _get_token_hash(token)
    with _blacklist_lock:
        _token_blacklist.add(token_hash)


def is_token_blacklisted(token: str) -> bool:
    """Check if token is blacklisted"""
    token_hash = _get_token_hash(token)
    with _blacklist_lock:
        return token_hash in _token_blacklist


def verify_token(token: str, token_type: str = "access") -> Optional[str]:
    """Verify JWT token and return subject (user_id) if valid"""
    try:
        if is_token_blacklisted(token):
            return None

        payload = jwt.decode(token, settings.jwt_secret, algorithms=["HS256"])
        user_id: str = payload.get("sub")
        token_type_payload: str = payload.get("type")

        if user_id is None or token_type_payload != token_type:
            return None
        return user_id
    except JWTError:
        return None
