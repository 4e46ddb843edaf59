"""
Schémas Pydantic pour les utilisateurs, l'authentification et les familles.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, field_validator

from app.datetime_utils import WEEKDAYS

VALID_ROLES = {"ADMIN", "TEACHER", "PARENT"}
MIN_PASSWORD_LENGTH = 6


class RegisterRequest(BaseModel):
    """Inscription publique : crée toujours un compte PARENT."""
    name: str
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom ne peut pas être vide.")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_long_enough(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Le mot de passe doit contenir au moins {MIN_PASSWORD_LENGTH} caractères.")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserCreate(BaseModel):
    """Création d'un compte par un administrateur (rôle au choix)."""
    name: str
    email: EmailStr
    password: str
    role: str = "PARENT"

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom ne peut pas être vide.")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_long_enough(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Le mot de passe doit contenir au moins {MIN_PASSWORD_LENGTH} caractères.")
        return v

    @field_validator("role")
    @classmethod
    def valid_role(cls, v: str) -> str:
        if v not in VALID_ROLES:
            raise ValueError(f"Rôle invalide. Valeurs acceptées : {sorted(VALID_ROLES)}")
        return v


class UserRoleUpdate(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def valid_role(cls, v: str) -> str:
        if v not in VALID_ROLES:
            raise ValueError(f"Rôle invalide. Valeurs acceptées : {sorted(VALID_ROLES)}")
        return v


class UserProfileUpdate(BaseModel):
    name: Optional[str] = None
    profile_picture_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le nom ne peut pas être vide.")
        return v.strip() if v else v


class AvailabilityUpdate(BaseModel):
    """Jours de la semaine (en anglais) où l'enseignant peut donner cours."""
    days: List[str]

    @field_validator("days")
    @classmethod
    def valid_days(cls, v: List[str]) -> List[str]:
        normalized = [d.strip().capitalize() for d in v]
        invalid = [d for d in normalized if d not in WEEKDAYS]
        if invalid:
            raise ValueError(f"Jour(s) invalide(s) : {invalid}. Valeurs acceptées : {list(WEEKDAYS)}")
        # dédupliqué, ordre de la semaine
        return [d for d in WEEKDAYS if d in normalized]


class CurrentUser(BaseModel):
    """Identité résolue depuis le token, passée explicitement aux handlers."""
    id: uuid.UUID
    name: str
    email: str
    role: str

    model_config = {"from_attributes": True}


class UserResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    role: str
    family_id: Optional[uuid.UUID] = None
    availability: Optional[List[str]] = None
    profile_picture_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MeResponse(UserResponse):
    children: List[uuid.UUID] = []


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# --- Familles ---

class FamilyCreate(BaseModel):
    family_name: str
    primary_contact_id: uuid.UUID
    member_ids: List[uuid.UUID] = []
    address: Optional[str] = None
    phone_number: Optional[str] = None

    @field_validator("family_name")
    @classmethod
    def family_name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom de la famille ne peut pas être vide.")
        return v.strip()


class FamilyMembersAdd(BaseModel):
    user_ids: List[uuid.UUID]

    @field_validator("user_ids")
    @classmethod
    def not_empty(cls, v: List[uuid.UUID]) -> List[uuid.UUID]:
        if not v:
            raise ValueError("La liste des membres ne peut pas être vide.")
        return v


class FamilyMember(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    role: str

    model_config = {"from_attributes": True}


class FamilyResponse(BaseModel):
    id: uuid.UUID
    family_name: str
    primary_contact_id: Optional[uuid.UUID]
    address: Optional[str]
    phone_number: Optional[str]
    members: List[FamilyMember]
