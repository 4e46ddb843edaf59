"""
Hachage des mots de passe (bcrypt) et émission / vérification des JWT d'accès.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.config import settings
from app.exceptions import UnauthorizedError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: uuid.UUID, expires_delta: Optional[timedelta] = None) -> str:
    """Signe un JWT dont le claim `sub` porte l'identifiant de l'utilisateur."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> uuid.UUID:
    """
    Vérifie la signature et l'expiration d'un JWT et retourne l'ID utilisateur.
    Lève UnauthorizedError si le token est expiré, falsifié ou mal formé.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Token expiré, veuillez vous reconnecter.")
    except JWTError:
        raise UnauthorizedError("Token invalide.")

    subject = payload.get("sub")
    try:
        return uuid.UUID(subject)
    except (TypeError, ValueError):
        raise UnauthorizedError("Token invalide.")
