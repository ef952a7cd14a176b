"""
Participant profile endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas import profile as profile_schemas
from app.services.profile_service import profile_service_obj

router = APIRouter(
    prefix="/profiles",
    tags=["profiles"]
)


@router.post("", response_model=profile_schemas.ProfileResponse, status_code=201)
def create_profile(
        profile: profile_schemas.ProfileCreate,
        db: Session = Depends(get_db)
):
    """
    Create a participant profile.

    Username must be unique. If username already exists,
    returns the existing profile instead of creating a duplicate.
    """
    return profile_service_obj.create_profile(
        db,
        profile.username,
        full_name=profile.full_name,
        avatar_url=profile.avatar_url
    )
