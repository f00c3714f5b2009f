from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.exceptions import NotFound
from ..core.security import UserRole
from ..models.user import User

class UserService:
    def __init__(self, db: Session):
        self.db = db

    def list_users(self, role: Optional[UserRole] = None) -> List[User]:
        """List users, optionally only those with ``role``."""
        query = self.db.query(User)
        if role is not None:
            query = query.filter(User.role == role)
        return query.order_by(User.name).all()

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFound(f"User {user_id} not found")
        return user
