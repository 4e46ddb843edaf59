"""
Router pour la gestion des classes et de leur roster.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_role
from app.schemas.school_class import (
    ClassChildAssign,
    ClassCreate,
    ClassDetailResponse,
    ClassResponse,
    ClassUpdate,
)
from app.schemas.user import CurrentUser
from app.services import class_service

router = APIRouter(prefix="/api/v1/classes", tags=["Classes"])

admin_only = require_role("ADMIN")


@router.post("", response_model=ClassResponse, status_code=201, summary="Créer une classe")
def create_class(data: ClassCreate, db: Session = Depends(get_db), _: CurrentUser = Depends(admin_only)):
    """Crée une nouvelle classe avec un nom unique et une capacité maximale."""
    return class_service.create_class(db, data)


@router.get("", response_model=List[ClassResponse], summary="Lister les classes")
def list_classes(
    include_archived: bool = False,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(get_current_user),
):
    """Retourne les classes avec leur nombre d'enfants assignés."""
    return class_service.get_classes(db, include_archived=include_archived)


@router.get("/mine", response_model=List[ClassResponse], summary="Mes classes")
def list_my_classes(db: Session = Depends(get_db), current_user: CurrentUser = Depends(require_role("TEACHER"))):
    return class_service.get_teacher_classes(db, current_user.id)


@router.get("/{class_id}", response_model=ClassDetailResponse, summary="Détail d'une classe")
def get_class(class_id: uuid.UUID, db: Session = Depends(get_db), _: CurrentUser = Depends(get_current_user)):
    school_class = class_service.get_class(db, class_id)
    if school_class is None:
        raise HTTPException(status_code=404, detail="Classe introuvable.")
    return school_class


@router.put("/{class_id}", response_model=ClassResponse, summary="Modifier une classe")
def update_class(
    class_id: uuid.UUID,
    data: ClassUpdate,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(admin_only),
):
    result = class_service.update_class(db, class_id, data)
    if result is None:
        raise HTTPException(status_code=404, detail="Classe introuvable.")
    return result


@router.post("/{class_id}/archive", response_model=ClassResponse, summary="Archiver une classe")
def archive_class(class_id: uuid.UUID, db: Session = Depends(get_db), _: CurrentUser = Depends(admin_only)):
    result = class_service.archive_class(db, class_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Classe introuvable.")
    return result


@router.delete("/{class_id}", status_code=204, summary="Supprimer une classe")
def delete_class(class_id: uuid.UUID, db: Session = Depends(get_db), _: CurrentUser = Depends(admin_only)):
    """
    Supprime une classe définitivement.
    Bloqué tant que des enfants y sont assignés.
    """
    if not class_service.delete_class(db, class_id):
        raise HTTPException(status_code=404, detail="Classe introuvable.")


# --- Roster ---

@router.post("/{class_id}/children", response_model=ClassResponse, summary="Assigner un enfant")
def assign_child(
    class_id: uuid.UUID,
    data: ClassChildAssign,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(admin_only),
):
    """Assigne un enfant à la classe. Refusé si la capacité est atteinte."""
    return class_service.assign_child_to_class(db, class_id, data.child_id)


@router.delete("/{class_id}/children/{child_id}", status_code=204, summary="Retirer un enfant")
def remove_child(
    class_id: uuid.UUID,
    child_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(admin_only),
):
    if not class_service.remove_child_from_class(db, class_id, child_id):
        raise HTTPException(status_code=404, detail="Cet enfant n'est pas assigné à cette classe.")
