"""
Router pour les contenus modérés : ressources pédagogiques et galerie photos.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_role
from app.schemas.content import (
    GalleryImageCreate,
    GalleryImageResponse,
    ModerationUpdate,
    ResourceCreate,
    ResourceResponse,
)
from app.schemas.user import CurrentUser
from app.services import content_service

router = APIRouter(prefix="/api/v1", tags=["Contenus"])

admin_only = require_role("ADMIN")


# --- Ressources ---

@router.post("/resources", response_model=ResourceResponse, status_code=201, summary="Soumettre une ressource")
def submit_resource(
    data: ResourceCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("TEACHER")),
):
    """Le fichier est déjà hébergé ; la ressource reste en attente jusqu'à modération."""
    return content_service.submit_resource(db, current_user.id, data)


@router.get("/resources", response_model=List[ResourceResponse], summary="Ressources approuvées")
def list_resources(
    type: Optional[str] = None,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(get_current_user),
):
    return content_service.get_resources(db, resource_type=type)


@router.get("/resources/pending", response_model=List[ResourceResponse], summary="Ressources à modérer")
def list_pending_resources(db: Session = Depends(get_db), _: CurrentUser = Depends(admin_only)):
    return content_service.get_pending_resources(db)


@router.put("/resources/{resource_id}/status", response_model=ResourceResponse, summary="Modérer une ressource")
def moderate_resource(
    resource_id: uuid.UUID,
    data: ModerationUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(admin_only),
):
    return content_service.moderate_resource(db, resource_id, current_user.id, data)


# --- Galerie ---

@router.post("/gallery", response_model=GalleryImageResponse, status_code=201, summary="Soumettre une photo")
def submit_image(
    data: GalleryImageCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("TEACHER", "ADMIN")),
):
    return content_service.submit_image(db, current_user.id, data)


@router.get("/gallery", response_model=List[GalleryImageResponse], summary="Photos approuvées")
def list_images(
    event_id: Optional[uuid.UUID] = None,
    class_id: Optional[uuid.UUID] = None,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(get_current_user),
):
    return content_service.get_images(db, event_id=event_id, class_id=class_id)


@router.get("/gallery/pending", response_model=List[GalleryImageResponse], summary="Photos à modérer")
def list_pending_images(db: Session = Depends(get_db), _: CurrentUser = Depends(admin_only)):
    return content_service.get_pending_images(db)


@router.put("/gallery/{image_id}/status", response_model=GalleryImageResponse, summary="Modérer une photo")
def moderate_image(
    image_id: uuid.UUID,
    data: ModerationUpdate,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(admin_only),
):
    return content_service.moderate_image(db, image_id, data)
