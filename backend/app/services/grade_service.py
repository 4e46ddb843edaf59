"""
Service métier pour le carnet de notes.

Seul l'enseignant titulaire d'une classe note les enfants qui y sont assignés.
Un parent consulte les notes de ses propres enfants.
"""

import uuid
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.models.child import Child
from app.models.grade import Grade
from app.models.school_class import SchoolClass
from app.schemas.grade import ChildGradeItem, ClassGradeItem, GradeCreate, GradeResponse
from app.schemas.user import CurrentUser
from app.services.child_service import NOT_FOUND_OR_DENIED

logger = logging.getLogger(__name__)


def create_grade(db: Session, teacher_id: uuid.UUID, data: GradeCreate) -> GradeResponse:
    """
    Enregistre une note.
    Lève NotFoundError (enfant ou classe), ForbiddenError si l'enseignant n'est pas
    le titulaire de la classe, BadRequestError si l'enfant n'y est pas assigné.
    """
    child = db.get(Child, data.child_id)
    if child is None:
        raise NotFoundError("Enfant introuvable.")
    school_class = db.get(SchoolClass, data.class_id)
    if school_class is None:
        raise NotFoundError("Classe introuvable.")

    if school_class.teacher_id != teacher_id:
        raise ForbiddenError("Seul l'enseignant de la classe peut noter ses élèves.")
    if child.assigned_class_id != data.class_id:
        raise BadRequestError("L'enfant n'est pas inscrit dans cette classe.")

    grade = Grade(**data.model_dump(), teacher_id=teacher_id)
    db.add(grade)
    db.commit()
    db.refresh(grade)
    logger.info("Note %s enregistrée pour l'enfant %s (classe %s)", grade.id, data.child_id, data.class_id)
    return GradeResponse.model_validate(grade)


def get_class_grades(db: Session, class_id: uuid.UUID, requester: CurrentUser) -> List[ClassGradeItem]:
    """Notes d'une classe, les plus récentes d'abord. Un enseignant ne lit que ses classes."""
    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        raise NotFoundError("Classe introuvable.")
    if requester.role == "TEACHER" and school_class.teacher_id != requester.id:
        raise ForbiddenError("Accès refusé : cette classe n'est pas la vôtre.")

    rows = db.execute(
        select(Grade, Child.first_name, Child.last_name)
        .join(Child, Child.id == Grade.child_id)
        .where(Grade.class_id == class_id)
        .order_by(Grade.date.desc())
    ).all()
    return [
        ClassGradeItem(
            **GradeResponse.model_validate(grade).model_dump(),
            child_first_name=first_name,
            child_last_name=last_name,
        )
        for grade, first_name, last_name in rows
    ]


def get_child_grades(db: Session, child_id: uuid.UUID, requester: CurrentUser) -> List[ChildGradeItem]:
    child = db.get(Child, child_id)
    if child is None:
        raise NotFoundError("Enfant introuvable.")
    if requester.role == "PARENT" and child.parent_id != requester.id:
        raise NotFoundError(NOT_FOUND_OR_DENIED)

    rows = db.execute(
        select(Grade, SchoolClass.name)
        .join(SchoolClass, SchoolClass.id == Grade.class_id)
        .where(Grade.child_id == child_id)
        .order_by(Grade.date.desc())
    ).all()
    return [
        ChildGradeItem(**GradeResponse.model_validate(grade).model_dump(), class_name=class_name)
        for grade, class_name in rows
    ]
