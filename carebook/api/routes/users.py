from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from ...core.database import get_db
from ...core.security import UserRole
from ...api.deps import get_current_user
from ...services.user_service import UserService
from ...schemas.auth import UserDetailResponse, UserListResponse

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(get_current_user)],
)

@router.get("", response_model=UserListResponse)
def list_users(
    role: Optional[UserRole] = None,
    db: Session = Depends(get_db),
):
    """List users, e.g. ``?role=DOCTOR`` when a patient picks a doctor."""
    users = UserService(db).list_users(role)
    return UserListResponse(
        users=[UserDetailResponse.model_validate(user) for user in users],
        count=len(users),
    )

@router.get("/{user_id}", response_model=UserDetailResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return UserDetailResponse.model_validate(UserService(db).get_user(user_id))
