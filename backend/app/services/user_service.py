"""
Service métier pour la gestion des comptes (administration) et des familles.
"""

import uuid
import logging
from typing import List

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import BadRequestError, ConflictError, NotFoundError
from app.models.attendance import Attendance
from app.models.content import GalleryImage, Resource
from app.models.event import Event
from app.models.schedule import Schedule
from app.models.school_class import SchoolClass
from app.models.user import Family, User
from app.schemas.user import (
    AvailabilityUpdate,
    FamilyCreate,
    FamilyMember,
    FamilyMembersAdd,
    FamilyResponse,
    UserCreate,
    UserProfileUpdate,
    UserResponse,
    UserRoleUpdate,
)
from app.security import hash_password

logger = logging.getLogger(__name__)


def get_users(db: Session) -> List[UserResponse]:
    users = db.execute(select(User).order_by(User.name)).scalars().all()
    return [UserResponse.model_validate(u) for u in users]


def get_teachers(db: Session) -> List[UserResponse]:
    teachers = db.execute(
        select(User).where(User.role == "TEACHER").order_by(User.name)
    ).scalars().all()
    return [UserResponse.model_validate(t) for t in teachers]


def get_user(db: Session, user_id: uuid.UUID) -> UserResponse:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("Utilisateur introuvable.")
    return UserResponse.model_validate(user)


def create_user(db: Session, data: UserCreate) -> UserResponse:
    """Création d'un compte par un administrateur. Lève ConflictError si l'email existe."""
    user = User(
        name=data.name,
        email=data.email.lower(),
        password_hash=hash_password(data.password),
        role=data.role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Un compte existe déjà avec cet email.")
    db.refresh(user)
    logger.info("Compte %s créé par un administrateur (rôle %s)", user.id, user.role)
    return UserResponse.model_validate(user)


def update_user_role(db: Session, user_id: uuid.UUID, data: UserRoleUpdate) -> UserResponse:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("Utilisateur introuvable.")

    previous = user.role
    user.role = data.role
    db.commit()
    db.refresh(user)
    logger.info("Rôle de %s : %s → %s", user_id, previous, data.role)
    return UserResponse.model_validate(user)


def update_profile(db: Session, user_id: uuid.UUID, data: UserProfileUpdate) -> UserResponse:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("Utilisateur introuvable.")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return UserResponse.model_validate(user)


def update_availability(db: Session, user_id: uuid.UUID, data: AvailabilityUpdate) -> UserResponse:
    """Enregistre les jours de disponibilité d'un enseignant (liste vide = aucune contrainte)."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("Utilisateur introuvable.")

    user.availability = data.days or None
    db.commit()
    db.refresh(user)
    return UserResponse.model_validate(user)


def delete_user(db: Session, user_id: uuid.UUID) -> None:
    """
    Supprime un compte et détache toutes les références vers lui dans la même transaction :
    enseignant de classe / séance, auteur de marquage, d'événement ou de contenu,
    contact principal de famille. Les enfants d'un parent sont supprimés avec lui (FK CASCADE).
    """
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("Utilisateur introuvable.")

    try:
        db.execute(update(SchoolClass).where(SchoolClass.teacher_id == user_id).values(teacher_id=None))
        db.execute(update(Schedule).where(Schedule.teacher_id == user_id).values(teacher_id=None))
        db.execute(update(Attendance).where(Attendance.marked_by == user_id).values(marked_by=None))
        db.execute(update(Event).where(Event.created_by == user_id).values(created_by=None))
        db.execute(update(Resource).where(Resource.uploaded_by == user_id).values(uploaded_by=None))
        db.execute(update(Resource).where(Resource.approved_by == user_id).values(approved_by=None))
        db.execute(update(GalleryImage).where(GalleryImage.uploaded_by == user_id).values(uploaded_by=None))
        db.execute(update(Family).where(Family.primary_contact_id == user_id).values(primary_contact_id=None))
        db.delete(user)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Compte %s supprimé", user_id)


# --- Familles ---

def create_family(db: Session, data: FamilyCreate) -> FamilyResponse:
    """
    Crée une famille et y rattache le contact principal et les membres.
    Tout est commité en une seule transaction. Lève BadRequestError si un utilisateur n'existe pas.
    """
    user_ids = set(data.member_ids) | {data.primary_contact_id}

    try:
        found = db.execute(
            select(func.count()).select_from(User).where(User.id.in_(user_ids))
        ).scalar() or 0
        if found != len(user_ids):
            raise BadRequestError("Un ou plusieurs utilisateurs sont introuvables.")

        family = Family(
            family_name=data.family_name,
            primary_contact_id=data.primary_contact_id,
            address=data.address,
            phone_number=data.phone_number,
        )
        db.add(family)
        db.flush()  # Obtenir l'ID avant de rattacher les membres

        db.execute(update(User).where(User.id.in_(user_ids)).values(family_id=family.id))
        db.commit()
    except (BadRequestError, SQLAlchemyError):
        db.rollback()
        raise

    db.refresh(family)
    logger.info("Famille '%s' créée (%s) : %d membre(s)", family.family_name, family.id, len(user_ids))
    return _family_to_response(db, family)


def get_family(db: Session, family_id: uuid.UUID) -> FamilyResponse:
    family = db.get(Family, family_id)
    if family is None:
        raise NotFoundError("Famille introuvable.")
    return _family_to_response(db, family)


def add_family_members(db: Session, family_id: uuid.UUID, data: FamilyMembersAdd) -> FamilyResponse:
    """Rattache des comptes existants à une famille. Les membres déjà présents sont ignorés."""
    family = db.get(Family, family_id)
    if family is None:
        raise NotFoundError("Famille introuvable.")

    requested = set(data.user_ids)
    try:
        found = db.execute(
            select(func.count()).select_from(User).where(User.id.in_(requested))
        ).scalar() or 0
        if found != len(requested):
            raise BadRequestError("Un ou plusieurs utilisateurs sont introuvables.")

        db.execute(update(User).where(User.id.in_(requested)).values(family_id=family.id))
        db.commit()
    except (BadRequestError, SQLAlchemyError):
        db.rollback()
        raise

    return _family_to_response(db, family)


def remove_family_member(db: Session, family_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    """
    Détache un membre de sa famille.
    Si c'était le contact principal, un autre membre prend le relais ;
    s'il ne reste personne, la famille est supprimée.
    Retourne True si la famille a été supprimée.
    """
    family = db.get(Family, family_id)
    if family is None:
        raise NotFoundError("Famille introuvable.")

    user = db.get(User, user_id)
    if user is None or user.family_id != family.id:
        raise NotFoundError("Ce membre n'appartient pas à cette famille.")

    family_deleted = False
    try:
        user.family_id = None
        db.flush()

        remaining = db.execute(
            select(User.id).where(User.family_id == family.id).order_by(User.created_at)
        ).scalars().all()

        if not remaining:
            db.delete(family)
            family_deleted = True
        elif family.primary_contact_id == user_id:
            family.primary_contact_id = remaining[0]

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Membre %s retiré de la famille %s%s",
        user_id, family_id, " (famille supprimée)" if family_deleted else "",
    )
    return family_deleted


def _family_to_response(db: Session, family: Family) -> FamilyResponse:
    members = db.execute(
        select(User).where(User.family_id == family.id).order_by(User.name)
    ).scalars().all()

    return FamilyResponse(
        id=family.id,
        family_name=family.family_name,
        primary_contact_id=family.primary_contact_id,
        address=family.address,
        phone_number=family.phone_number,
        members=[FamilyMember.model_validate(m) for m in members],
    )
