"""
Service métier pour les enfants inscrits par les parents.
Un parent ne voit et ne modifie que ses propres enfants.
"""

import uuid
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.models.child import Child
from app.models.school_class import SchoolClass
from app.schemas.child import ChildCreate, ChildResponse, ChildUpdate

logger = logging.getLogger(__name__)

NOT_FOUND_OR_DENIED = "Enfant introuvable ou accès refusé."


def register_child(db: Session, parent_id: uuid.UUID, data: ChildCreate) -> ChildResponse:
    child = Child(parent_id=parent_id, **data.model_dump())
    db.add(child)
    db.commit()
    db.refresh(child)
    logger.info("Enfant %s inscrit par le parent %s", child.id, parent_id)
    return ChildResponse.model_validate(child)


def get_my_children(db: Session, parent_id: uuid.UUID) -> List[ChildResponse]:
    children = db.execute(
        select(Child).where(Child.parent_id == parent_id).order_by(Child.first_name)
    ).scalars().all()
    return [ChildResponse.model_validate(c) for c in children]


def update_child(db: Session, parent_id: uuid.UUID, child_id: uuid.UUID, data: ChildUpdate) -> ChildResponse:
    """La classe assignée n'est pas modifiable ici : elle passe par le garde de capacité."""
    child = _get_owned_child(db, parent_id, child_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(child, field, value)
    db.commit()
    db.refresh(child)
    return ChildResponse.model_validate(child)


def delete_child(db: Session, parent_id: uuid.UUID, child_id: uuid.UUID) -> None:
    child = _get_owned_child(db, parent_id, child_id)
    db.delete(child)
    db.commit()
    logger.info("Enfant %s supprimé par le parent %s", child_id, parent_id)


def get_children_by_class(db: Session, class_id: uuid.UUID) -> List[ChildResponse]:
    if db.get(SchoolClass, class_id) is None:
        raise NotFoundError("Classe introuvable.")

    children = db.execute(
        select(Child)
        .where(Child.assigned_class_id == class_id)
        .order_by(Child.last_name, Child.first_name)
    ).scalars().all()
    return [ChildResponse.model_validate(c) for c in children]


def _get_owned_child(db: Session, parent_id: uuid.UUID, child_id: uuid.UUID) -> Child:
    child = db.get(Child, child_id)
    if child is None or child.parent_id != parent_id:
        raise NotFoundError(NOT_FOUND_OR_DENIED)
    return child
