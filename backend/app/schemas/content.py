"""
Schémas Pydantic pour les ressources et la galerie (contenus modérés).
Le stockage des fichiers est externe : seules les URLs transitent par l'API.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

VALID_RESOURCE_TYPES = {"LESSON_PLAN", "SONG", "VIDEO", "CRAFT"}
MODERATION_DECISIONS = {"APPROVED", "REJECTED"}


class ModerationUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def valid_decision(cls, v: str) -> str:
        if v not in MODERATION_DECISIONS:
            raise ValueError(f"Statut invalide. Valeurs acceptées : {sorted(MODERATION_DECISIONS)}")
        return v


class ResourceCreate(BaseModel):
    title: str
    description: Optional[str] = None
    type: str
    file_url: str

    @field_validator("title", "file_url")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()

    @field_validator("type")
    @classmethod
    def valid_type(cls, v: str) -> str:
        if v not in VALID_RESOURCE_TYPES:
            raise ValueError(f"Type invalide. Valeurs acceptées : {sorted(VALID_RESOURCE_TYPES)}")
        return v


class ResourceResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str]
    type: str
    file_url: str
    uploaded_by: Optional[uuid.UUID]
    status: str
    approved_by: Optional[uuid.UUID]
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class GalleryImageCreate(BaseModel):
    image_url: str
    caption: Optional[str] = None
    event_id: Optional[uuid.UUID] = None
    class_id: Optional[uuid.UUID] = None

    @field_validator("image_url")
    @classmethod
    def url_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("L'URL de l'image ne peut pas être vide.")
        return v.strip()


class GalleryImageResponse(BaseModel):
    id: uuid.UUID
    image_url: str
    caption: Optional[str]
    event_id: Optional[uuid.UUID]
    class_id: Optional[uuid.UUID]
    uploaded_by: Optional[uuid.UUID]
    status: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
