"""
Router pour les retours des parents sur les enseignants.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_role
from app.exceptions import ForbiddenError
from app.schemas.feedback import FeedbackCreate, FeedbackResponse, TeacherRatingResponse
from app.schemas.user import CurrentUser
from app.services import feedback_service

router = APIRouter(prefix="/api/v1/feedback", tags=["Retours"])


@router.post("", response_model=FeedbackResponse, status_code=201, summary="Donner un retour")
def submit_feedback(
    data: FeedbackCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("PARENT")),
):
    return feedback_service.submit_feedback(db, current_user.id, data)


@router.get("/teacher/{teacher_id}", response_model=List[FeedbackResponse], summary="Retours d'un enseignant")
def list_teacher_feedback(
    teacher_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("TEACHER", "ADMIN")),
):
    """Un enseignant ne lit que ses propres retours."""
    if current_user.role == "TEACHER" and current_user.id != teacher_id:
        raise ForbiddenError("Accès refusé : vous ne pouvez consulter que vos propres retours.")
    return feedback_service.get_teacher_feedback(db, teacher_id)


@router.get("/teacher/{teacher_id}/rating", response_model=TeacherRatingResponse, summary="Note moyenne")
def get_teacher_rating(
    teacher_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(get_current_user),
):
    return feedback_service.get_teacher_rating(db, teacher_id)
