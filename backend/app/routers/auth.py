"""
Router d'authentification : inscription, connexion, profil courant.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.schemas.user import CurrentUser, LoginRequest, MeResponse, RegisterRequest, TokenResponse
from app.services import auth_service

router = APIRouter(prefix="/api/v1/auth", tags=["Authentification"])


@router.post("/register", response_model=TokenResponse, status_code=201, summary="Créer un compte parent")
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Inscription publique. Le compte créé a toujours le rôle PARENT."""
    return auth_service.register(db, data)


@router.post("/login", response_model=TokenResponse, summary="Se connecter")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    return auth_service.login(db, data)


@router.get("/me", response_model=MeResponse, summary="Profil de l'utilisateur connecté")
def me(current_user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return auth_service.get_me(db, current_user)
