"""GET/PUT /v1/profile - display name, persona and declared monthly income"""

from fastapi import APIRouter, Depends, HTTPException, Query

from finbridge_gateway.api.dependencies import get_store
from finbridge_gateway.api.v1.schemas import ProfileSchema, ProfileUpdate
from finbridge_gateway.infrastructure.database.repositories import SqlRecordStore

router = APIRouter()


@router.get("/profile", response_model=ProfileSchema)
def get_profile(
    user_id: str = Query(..., description="User identifier"),
    store: SqlRecordStore = Depends(get_store),
):
    profile = store.get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return ProfileSchema.model_validate(profile)


@router.put("/profile", response_model=ProfileSchema)
def upsert_profile(
    request_body: ProfileUpdate,
    user_id: str = Query(..., description="User identifier"),
    store: SqlRecordStore = Depends(get_store),
):
    """Create the profile or update the supplied fields"""
    profile = store.upsert_profile(user_id, request_body.model_dump(exclude_none=True))
    return ProfileSchema.model_validate(profile)
