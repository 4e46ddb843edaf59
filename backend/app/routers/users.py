"""
Router pour la gestion des comptes, des disponibilités et des familles.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_role
from app.schemas.user import (
    AvailabilityUpdate,
    CurrentUser,
    FamilyCreate,
    FamilyMembersAdd,
    FamilyResponse,
    UserCreate,
    UserProfileUpdate,
    UserResponse,
    UserRoleUpdate,
)
from app.services import user_service

router = APIRouter(prefix="/api/v1", tags=["Utilisateurs"])

admin_only = require_role("ADMIN")


@router.get("/users", response_model=List[UserResponse], summary="Lister les comptes")
def list_users(db: Session = Depends(get_db), _: CurrentUser = Depends(admin_only)):
    return user_service.get_users(db)


@router.post("/users", response_model=UserResponse, status_code=201, summary="Créer un compte")
def create_user(data: UserCreate, db: Session = Depends(get_db), _: CurrentUser = Depends(admin_only)):
    """Création d'un compte avec un rôle choisi (ADMIN, TEACHER ou PARENT)."""
    return user_service.create_user(db, data)


@router.get("/users/teachers", response_model=List[UserResponse], summary="Lister les enseignants")
def list_teachers(db: Session = Depends(get_db), _: CurrentUser = Depends(get_current_user)):
    return user_service.get_teachers(db)


@router.put("/users/me", response_model=UserResponse, summary="Modifier son profil")
def update_my_profile(
    data: UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return user_service.update_profile(db, current_user.id, data)


@router.put("/users/me/availability", response_model=UserResponse, summary="Déclarer ses disponibilités")
def update_my_availability(
    data: AvailabilityUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("TEACHER")),
):
    """Jours où l'enseignant peut être planifié. Une liste vide lève la contrainte."""
    return user_service.update_availability(db, current_user.id, data)


@router.get("/users/{user_id}", response_model=UserResponse, summary="Détail d'un compte")
def get_user(user_id: uuid.UUID, db: Session = Depends(get_db), _: CurrentUser = Depends(admin_only)):
    return user_service.get_user(db, user_id)


@router.put("/users/{user_id}/role", response_model=UserResponse, summary="Changer le rôle d'un compte")
def update_user_role(
    user_id: uuid.UUID,
    data: UserRoleUpdate,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(admin_only),
):
    return user_service.update_user_role(db, user_id, data)


@router.delete("/users/{user_id}", status_code=204, summary="Supprimer un compte")
def delete_user(user_id: uuid.UUID, db: Session = Depends(get_db), _: CurrentUser = Depends(admin_only)):
    """
    Supprime un compte. Les références (classes, séances, marquages, contenus)
    sont détachées ; les enfants d'un parent sont supprimés avec lui.
    """
    user_service.delete_user(db, user_id)


# --- Familles ---

@router.post("/families", response_model=FamilyResponse, status_code=201, summary="Créer une famille")
def create_family(data: FamilyCreate, db: Session = Depends(get_db), _: CurrentUser = Depends(admin_only)):
    return user_service.create_family(db, data)


@router.get("/families/{family_id}", response_model=FamilyResponse, summary="Détail d'une famille")
def get_family(family_id: uuid.UUID, db: Session = Depends(get_db), _: CurrentUser = Depends(admin_only)):
    return user_service.get_family(db, family_id)


@router.post("/families/{family_id}/members", response_model=FamilyResponse, summary="Ajouter des membres")
def add_family_members(
    family_id: uuid.UUID,
    data: FamilyMembersAdd,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(admin_only),
):
    return user_service.add_family_members(db, family_id, data)


@router.delete("/families/{family_id}/members/{user_id}", summary="Retirer un membre")
def remove_family_member(
    family_id: uuid.UUID,
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(admin_only),
):
    """Retire un membre. La famille est supprimée s'il n'en reste aucun."""
    family_deleted = user_service.remove_family_member(db, family_id, user_id)
    return {"family_id": str(family_id), "user_id": str(user_id), "family_deleted": family_deleted}
