"""
Access tokens and password hashing.

Tokens are HS256 JWTs whose claims identify the user, the user's role and
the client the user belongs to. Passwords are stored as bcrypt hashes.
"""
import os
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Tuple
from jose import JWTError, jwt
from passlib.context import CryptContext
from uuid import UUID

# Configuration
SECRET_KEY = os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))  # 24 hours
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Claims every user token must carry
REQUIRED_CLAIMS = ("sub", "clientId")

# Hashes below the configured cost are upgraded on the next successful login
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
    bcrypt__min_rounds=BCRYPT_ROUNDS,
)


class JWTHandler:
    """Issue and decode access tokens."""

    @staticmethod
    def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """
        Sign ``data`` as an access token.

        Args:
            data: Claims to encode; any ``exp`` claim is replaced
            expires_delta: Lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

        Returns:
            str: Encoded JWT
        """
        lifetime = expires_delta if expires_delta is not None else timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
        claims = {**data, "exp": datetime.now(timezone.utc) + lifetime}
        return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)

    @staticmethod
    def verify_token(token: str) -> Optional[Dict[str, Any]]:
        """Return the claims of a valid, unexpired token, or None."""
        try:
            return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        except JWTError:
            return None

    @staticmethod
    def create_user_token(user_id: UUID, client_id: UUID, email: str, role: str) -> str:
        """
        Issue the token returned by register and login.

        Args:
            user_id: User ID, stored as ``sub``
            client_id: Client the user belongs to, stored as ``clientId``
            email: User email
            role: ``admin`` or ``member``
        """
        return JWTHandler.create_access_token({
            "sub": str(user_id),
            "email": email,
            "role": role,
            "clientId": str(client_id),
        })

    @staticmethod
    def decode_user_token(token: str) -> Optional[Dict[str, Any]]:
        """Decode a user token, rejecting tokens without user or client claims."""
        claims = JWTHandler.verify_token(token)
        if claims is None or any(not claims.get(name) for name in REQUIRED_CLAIMS):
            return None
        return claims


class PasswordHandler:
    """bcrypt password hashing."""

    @staticmethod
    def hash_password(password: str) -> str:
        return pwd_context.hash(password)

    @staticmethod
    def verify_and_update(plain_password: str, hashed_password: str) -> Tuple[bool, Optional[str]]:
        """
        Verify a password and rehash it if the stored hash uses outdated settings.

        Returns:
            Tuple[bool, Optional[str]]: Whether the password matched, and a
            replacement hash when the stored one should be upgraded
        """
        return pwd_context.verify_and_update(plain_password, hashed_password)

    @staticmethod
    def dummy_verify() -> bool:
        """Spend the cost of a hash check when there is no stored hash to check."""
        return pwd_context.dummy_verify()


# PUBLIC_INTERFACE
def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Module-level shortcut for ``JWTHandler.create_access_token``."""
    return JWTHandler.create_access_token(data, expires_delta)
