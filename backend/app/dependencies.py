"""
Dépendances FastAPI d'authentification et de contrôle des rôles.

L'identité est résolue à chaque requête depuis le bearer token puis passée
explicitement aux handlers sous forme de CurrentUser.
"""

import logging
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import ForbiddenError, UnauthorizedError
from app.models.user import User
from app.schemas.user import CurrentUser
from app.security import decode_access_token

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """Résout le bearer token en utilisateur. 401 si absent, invalide ou compte supprimé."""
    if not token:
        raise UnauthorizedError("Authentification requise.")

    user_id = decode_access_token(token)
    user = db.get(User, user_id)
    if user is None:
        raise UnauthorizedError("Token invalide.")

    return CurrentUser(id=user.id, name=user.name, email=user.email, role=user.role)


def require_role(*roles: str) -> Callable[..., CurrentUser]:
    """
    Fabrique une dépendance qui laisse passer uniquement les rôles autorisés.

    Usage : current_user: CurrentUser = Depends(require_role("ADMIN", "TEACHER"))
    """
    allowed = set(roles)

    def _check(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed:
            logger.info(
                "Accès refusé : %s (%s) hors des rôles %s",
                current_user.id, current_user.role, sorted(allowed),
            )
            raise ForbiddenError("Accès refusé : permissions insuffisantes.")
        return current_user

    return _check
