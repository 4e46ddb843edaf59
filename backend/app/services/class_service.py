"""
Service métier pour la gestion des classes et de leur roster.

Le roster d'une classe se déduit des enfants dont assigned_class_id pointe vers elle.
La capacité est vérifiée au moment de l'assignation, sous verrou de ligne sur la classe.
"""

import uuid
import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import AppError, BadRequestError, CapacityExceededError, ConflictError, NotFoundError
from app.models.child import Child
from app.models.school_class import SchoolClass
from app.models.user import User
from app.schemas.child import ChildResponse
from app.schemas.school_class import (
    ClassCreate,
    ClassDetailResponse,
    ClassResponse,
    ClassUpdate,
)

logger = logging.getLogger(__name__)


def create_class(db: Session, data: ClassCreate) -> ClassResponse:
    """
    Crée une nouvelle classe.
    Lève ConflictError si le nom existe déjà, BadRequestError si l'enseignant est invalide.
    """
    if data.teacher_id is not None:
        _check_teacher(db, data.teacher_id)

    school_class = SchoolClass(**data.model_dump(), archived=False)
    db.add(school_class)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Une classe avec le nom '{data.name}' existe déjà.")
    db.refresh(school_class)
    logger.info("Classe créée : %s (%s), capacité %d", school_class.name, school_class.id, school_class.capacity)
    return _to_response(db, school_class)


def get_classes(db: Session, include_archived: bool = False) -> List[ClassResponse]:
    """Retourne les classes triées par nom (hors archives par défaut)."""
    query = select(SchoolClass).order_by(SchoolClass.name)
    if not include_archived:
        query = query.where(SchoolClass.archived.is_(False))
    classes = db.execute(query).scalars().all()
    return [_to_response(db, c) for c in classes]


def get_class(db: Session, class_id: uuid.UUID) -> Optional[ClassDetailResponse]:
    """Retourne une classe avec son roster courant, ou None si inexistante."""
    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        return None

    students = db.execute(
        select(Child)
        .where(Child.assigned_class_id == class_id)
        .order_by(Child.last_name, Child.first_name)
    ).scalars().all()

    return ClassDetailResponse(
        **_to_response(db, school_class).model_dump(),
        students=[ChildResponse.model_validate(s) for s in students],
    )


def get_teacher_classes(db: Session, teacher_id: uuid.UUID) -> List[ClassResponse]:
    classes = db.execute(
        select(SchoolClass)
        .where(SchoolClass.teacher_id == teacher_id, SchoolClass.archived.is_(False))
        .order_by(SchoolClass.name)
    ).scalars().all()
    return [_to_response(db, c) for c in classes]


def update_class(db: Session, class_id: uuid.UUID, data: ClassUpdate) -> Optional[ClassResponse]:
    """
    Met à jour les champs fournis d'une classe.
    La capacité ne peut pas descendre sous le nombre d'enfants déjà assignés ;
    la ligne est verrouillée comme lors d'une assignation.
    """
    try:
        school_class = db.execute(
            select(SchoolClass).where(SchoolClass.id == class_id).with_for_update()
        ).scalar()
        if school_class is None:
            db.rollback()
            return None

        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("teacher_id") is not None:
            _check_teacher(db, update_data["teacher_id"])

        if update_data.get("capacity") is not None:
            current = _count_students(db, class_id)
            if update_data["capacity"] < current:
                raise BadRequestError(
                    f"Capacité trop faible : {current} enfant(s) déjà assigné(s) à cette classe."
                )

        for field, value in update_data.items():
            setattr(school_class, field, value)

        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Une classe avec ce nom existe déjà.")
    except (AppError, SQLAlchemyError):
        db.rollback()
        raise

    db.refresh(school_class)
    return _to_response(db, school_class)


def archive_class(db: Session, class_id: uuid.UUID) -> Optional[ClassResponse]:
    """Archive une classe (suppression logique). Le roster est conservé."""
    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        return None

    school_class.archived = True
    db.commit()
    db.refresh(school_class)
    logger.info("Classe archivée : %s", class_id)
    return _to_response(db, school_class)


def delete_class(db: Session, class_id: uuid.UUID) -> bool:
    """
    Supprime une classe.
    Bloqué tant que des enfants y sont assignés.
    Retourne True si supprimé, False si introuvable.
    """
    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        return False

    if _count_students(db, class_id) > 0:
        raise ConflictError(
            "Impossible de supprimer cette classe : des enfants y sont encore assignés. "
            "Réassignez-les ou retirez-les d'abord."
        )

    db.delete(school_class)
    db.commit()
    return True


def assign_child_to_class(db: Session, class_id: uuid.UUID, child_id: uuid.UUID) -> ClassResponse:
    """
    Assigne un enfant à une classe en respectant la capacité.

    La ligne de la classe est verrouillée (SELECT ... FOR UPDATE) pendant le
    comptage puis la mise à jour : deux assignations concurrentes sur la même
    classe sont sérialisées et ne peuvent pas dépasser la capacité.
    Un enfant déjà dans une autre classe y est retiré (une seule classe à la fois).
    """
    try:
        school_class = db.execute(
            select(SchoolClass).where(SchoolClass.id == class_id).with_for_update()
        ).scalar()
        if school_class is None:
            raise NotFoundError("Classe introuvable.")
        if school_class.archived:
            raise BadRequestError("Impossible d'assigner un enfant à une classe archivée.")

        child = db.get(Child, child_id)
        if child is None:
            raise NotFoundError("Enfant introuvable.")

        if child.assigned_class_id == class_id:
            logger.debug("Enfant %s déjà dans la classe %s, rien à faire", child_id, class_id)
        else:
            current = _count_students(db, class_id)
            if current >= school_class.capacity:
                raise CapacityExceededError(
                    f"La classe '{school_class.name}' a atteint sa capacité maximale "
                    f"({school_class.capacity})."
                )
            previous_class_id = child.assigned_class_id
            child.assigned_class_id = class_id
            logger.info(
                "Enfant %s assigné à la classe %s (%d/%d)%s",
                child_id, class_id, current + 1, school_class.capacity,
                f", retiré de {previous_class_id}" if previous_class_id else "",
            )

        db.commit()
    except (AppError, SQLAlchemyError):
        db.rollback()
        raise

    return _to_response(db, school_class)


def remove_child_from_class(db: Session, class_id: uuid.UUID, child_id: uuid.UUID) -> bool:
    """Retire un enfant d'une classe. Retourne True si retiré, False si l'enfant n'y était pas."""
    child = db.get(Child, child_id)
    if child is None or child.assigned_class_id != class_id:
        return False
    child.assigned_class_id = None
    db.commit()
    logger.info("Enfant %s retiré de la classe %s", child_id, class_id)
    return True


def _check_teacher(db: Session, teacher_id: uuid.UUID) -> User:
    teacher = db.get(User, teacher_id)
    if teacher is None or teacher.role != "TEACHER":
        raise BadRequestError("Enseignant invalide.")
    return teacher


def _count_students(db: Session, class_id: uuid.UUID) -> int:
    return db.execute(
        select(func.count())
        .select_from(Child)
        .where(Child.assigned_class_id == class_id)
    ).scalar() or 0


def _to_response(db: Session, school_class: SchoolClass) -> ClassResponse:
    """Construit le schéma de réponse avec le nombre d'enfants assignés."""
    return ClassResponse(
        id=school_class.id,
        name=school_class.name,
        age_range=school_class.age_range,
        capacity=school_class.capacity,
        description=school_class.description,
        teacher_id=school_class.teacher_id,
        archived=bool(school_class.archived),
        nb_students=_count_students(db, school_class.id),
        created_at=school_class.created_at,
        updated_at=school_class.updated_at,
    )
