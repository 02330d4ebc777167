"""Password hashing and session tokens."""
from datetime import datetime, timedelta, timezone
import bcrypt
import jwt
from app.config import get_settings
from app.models.user import UserRole

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def _pwd_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_pwd_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    if not plain or not hashed:
        return False
    try:
        return bcrypt.checkpw(_pwd_bytes(plain), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(user_id: int, email: str, role: UserRole) -> str:
    """Session token. The role claim is informational; guards re-read the user row."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),  # PyJWT expects "sub" to be a string
        "email": email,
        "role": role.value,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_access_token_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token_with_error(token: str) -> tuple[dict | None, str | None]:
    """Decode JWT; returns (payload, error_message)."""
    if not token or not isinstance(token, str):
        return None, "empty token"
    settings = get_settings()
    try:
        payload = jwt.decode(
            token.strip(),
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        return payload, None
    except jwt.ExpiredSignatureError:
        return None, "token expired"
    except jwt.PyJWTError as e:
        return None, str(e)


def user_id_from_token(token: str) -> int | None:
    payload, _ = decode_token_with_error(token)
    if not payload:
        return None
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None
