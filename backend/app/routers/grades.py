"""
Router pour le carnet de notes.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_role
from app.schemas.grade import ChildGradeItem, ClassGradeItem, GradeCreate, GradeResponse
from app.schemas.user import CurrentUser
from app.services import grade_service

router = APIRouter(prefix="/api/v1/grades", tags=["Notes"])


@router.post("", response_model=GradeResponse, status_code=201, summary="Noter un enfant")
def create_grade(
    data: GradeCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("TEACHER")),
):
    return grade_service.create_grade(db, current_user.id, data)


@router.get("/class/{class_id}", response_model=List[ClassGradeItem], summary="Notes d'une classe")
def list_class_grades(
    class_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("TEACHER", "ADMIN")),
):
    return grade_service.get_class_grades(db, class_id, current_user)


@router.get("/child/{child_id}", response_model=List[ChildGradeItem], summary="Notes d'un enfant")
def list_child_grades(
    child_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("PARENT", "ADMIN")),
):
    return grade_service.get_child_grades(db, child_id, current_user)
