# khata/core/security.py
from typing import Dict
from jose import jwt, JWTError
from passlib.context import CryptContext
from khata.core.config import JWT_SECRET, JWT_ALGORITHM, JWT_AUDIENCE

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_pin(pin: str) -> str:
    return pwd_context.hash(pin)


def verify_pin(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def decode_token(token: str) -> Dict:
    """Verify a Supabase-issued access token and return its claims."""
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM], audience=JWT_AUDIENCE)
    except JWTError:
        raise ValueError("Invalid or expired token")
