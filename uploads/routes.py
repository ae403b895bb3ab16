# src/uploads/routes.py
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from auth.models import User
from auth.routes import get_current_user
from auth.schemas import UserResponse, UserProfileUpdate
from auth.services import AuthService
from database import get_db
from uploads.schemas import UploadResponse
from uploads.services import MediaStorage

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("/{kind}", response_model=UploadResponse)
async def upload_media(
    kind: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Upload a profile picture, post/story media or a video file."""
    stored = await MediaStorage.save(kind, file, current_user.id)
    response = {"success": True, **stored}
    if kind == "profile":
        update = UserProfileUpdate(profile_picture=stored["file_url"])
        user = await run_in_threadpool(AuthService.update_profile, current_user, update, db)
        response["user"] = UserResponse.model_validate(user)
    return response
