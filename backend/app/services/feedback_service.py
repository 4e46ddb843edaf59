"""
Service métier pour les retours des parents sur les enseignants.
"""

import uuid
import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.exceptions import BadRequestError
from app.models.feedback import Feedback
from app.models.school_class import SchoolClass
from app.models.user import User
from app.schemas.feedback import FeedbackCreate, FeedbackResponse, TeacherRatingResponse

logger = logging.getLogger(__name__)


def submit_feedback(db: Session, parent_id: uuid.UUID, data: FeedbackCreate) -> FeedbackResponse:
    teacher = db.get(User, data.teacher_id)
    if teacher is None or teacher.role != "TEACHER":
        raise BadRequestError("Enseignant invalide.")
    if data.class_id is not None and db.get(SchoolClass, data.class_id) is None:
        raise BadRequestError("Classe introuvable.")

    feedback = Feedback(parent_id=parent_id, **data.model_dump())
    db.add(feedback)
    db.commit()
    db.refresh(feedback)
    logger.info("Retour %s du parent %s sur l'enseignant %s (%d/5)", feedback.id, parent_id, data.teacher_id, data.rating)
    return FeedbackResponse.model_validate(feedback)


def get_teacher_feedback(db: Session, teacher_id: uuid.UUID) -> List[FeedbackResponse]:
    feedbacks = db.execute(
        select(Feedback).where(Feedback.teacher_id == teacher_id).order_by(Feedback.created_at.desc())
    ).scalars().all()
    return [FeedbackResponse.model_validate(f) for f in feedbacks]


def get_teacher_rating(db: Session, teacher_id: uuid.UUID) -> TeacherRatingResponse:
    """Moyenne des notes arrondie au dixième ; 0 si aucun retour."""
    average, count = db.execute(
        select(func.avg(Feedback.rating), func.count(Feedback.id)).where(Feedback.teacher_id == teacher_id)
    ).one()
    return TeacherRatingResponse(
        teacher_id=teacher_id,
        average_rating=round(float(average), 1) if average is not None else 0.0,
        count=count or 0,
    )
