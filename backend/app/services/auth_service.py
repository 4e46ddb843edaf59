"""
Service d'authentification : inscription des parents, connexion, profil courant.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, NotFoundError, UnauthorizedError
from app.models.child import Child
from app.models.user import User
from app.schemas.user import (
    CurrentUser,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from app.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Identifiants invalides."


def register(db: Session, data: RegisterRequest) -> TokenResponse:
    """
    Crée un compte PARENT et retourne directement un token d'accès.
    Lève ConflictError si l'email est déjà utilisé.
    """
    email = data.email.lower()
    existing = db.execute(select(User).where(User.email == email)).scalar()
    if existing:
        raise ConflictError("Un compte existe déjà avec cet email.")

    user = User(
        name=data.name,
        email=email,
        password_hash=hash_password(data.password),
        role="PARENT",
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Un compte existe déjà avec cet email.")
    db.refresh(user)

    logger.info("Nouveau compte parent : %s", user.id)
    return TokenResponse(
        access_token=create_access_token(user.id),
        user=UserResponse.model_validate(user),
    )


def login(db: Session, data: LoginRequest) -> TokenResponse:
    """Vérifie les identifiants. Même message d'erreur pour email inconnu et mauvais mot de passe."""
    user = db.execute(select(User).where(User.email == data.email.lower())).scalar()
    if user is None or not verify_password(data.password, user.password_hash):
        logger.info("Échec de connexion pour %s", data.email)
        raise UnauthorizedError(INVALID_CREDENTIALS)

    return TokenResponse(
        access_token=create_access_token(user.id),
        user=UserResponse.model_validate(user),
    )


def get_me(db: Session, current_user: CurrentUser) -> MeResponse:
    """Profil de l'utilisateur connecté avec les IDs de ses enfants."""
    user = db.get(User, current_user.id)
    if user is None:
        raise NotFoundError("Utilisateur introuvable.")

    child_ids = db.execute(
        select(Child.id).where(Child.parent_id == user.id).order_by(Child.first_name)
    ).scalars().all()

    return MeResponse(
        **UserResponse.model_validate(user).model_dump(),
        children=list(child_ids),
    )
