"""
Router pour les enfants inscrits par les parents.
"""

import uuid
from typing import List, Optional
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.datetime_utils import to_naive_utc
from app.dependencies import require_role
from app.schemas.attendance import ChildAttendanceItem
from app.schemas.child import ChildCreate, ChildResponse, ChildUpdate
from app.schemas.user import CurrentUser
from app.services import attendance_service, child_service

router = APIRouter(prefix="/api/v1/children", tags=["Enfants"])

parent_only = require_role("PARENT")


@router.post("", response_model=ChildResponse, status_code=201, summary="Inscrire un enfant")
def register_child(data: ChildCreate, db: Session = Depends(get_db), current_user: CurrentUser = Depends(parent_only)):
    return child_service.register_child(db, current_user.id, data)


@router.get("", response_model=List[ChildResponse], summary="Mes enfants")
def list_my_children(db: Session = Depends(get_db), current_user: CurrentUser = Depends(parent_only)):
    return child_service.get_my_children(db, current_user.id)


@router.get("/class/{class_id}", response_model=List[ChildResponse], summary="Enfants d'une classe")
def list_class_children(
    class_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(require_role("TEACHER", "ADMIN")),
):
    return child_service.get_children_by_class(db, class_id)


@router.put("/{child_id}", response_model=ChildResponse, summary="Modifier un enfant")
def update_child(
    child_id: uuid.UUID,
    data: ChildUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(parent_only),
):
    return child_service.update_child(db, current_user.id, child_id, data)


@router.delete("/{child_id}", status_code=204, summary="Supprimer un enfant")
def delete_child(child_id: uuid.UUID, db: Session = Depends(get_db), current_user: CurrentUser = Depends(parent_only)):
    child_service.delete_child(db, current_user.id, child_id)


@router.get("/{child_id}/attendance", response_model=List[ChildAttendanceItem], summary="Présences d'un enfant")
def get_child_attendance(
    child_id: uuid.UUID,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("PARENT", "ADMIN")),
):
    """Un parent ne voit que ses propres enfants ; un administrateur voit tout."""
    return attendance_service.get_child_attendance(
        db, child_id, current_user, to_naive_utc(start), to_naive_utc(end),
    )
