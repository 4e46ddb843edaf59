"""
Schémas Pydantic pour les retours des parents.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class FeedbackCreate(BaseModel):
    teacher_id: uuid.UUID
    class_id: Optional[uuid.UUID] = None
    rating: int
    comments: Optional[str] = None

    @field_validator("rating")
    @classmethod
    def rating_in_range(cls, v: int) -> int:
        if not 1 <= v <= 5:
            raise ValueError("La note doit être comprise entre 1 et 5.")
        return v


class FeedbackResponse(BaseModel):
    id: uuid.UUID
    parent_id: uuid.UUID
    teacher_id: uuid.UUID
    class_id: Optional[uuid.UUID]
    rating: int
    comments: Optional[str]
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TeacherRatingResponse(BaseModel):
    teacher_id: uuid.UUID
    average_rating: float
    count: int
