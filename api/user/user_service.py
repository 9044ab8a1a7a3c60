import datetime
import logging
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from api.user.user_model import User
from api.user.user_schema import UserResponse
from utils.exceptions import ConflictError, PersistenceError

logger = logging.getLogger(__name__)

EMAIL_EXISTS_MESSAGE = "Email address already exists."


class UserStore:
    """
    User persistence keyed by unique email.

    Uniqueness is enforced by the unique index on ``users.email``; a violating
    insert surfaces as ConflictError.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[UserResponse]:
        try:
            user = self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(detail=f"Error finding user by email: {e}") from e
        if not user:
            return None
        return UserResponse.model_validate(user)

    def create(self, email: str, full_name: str) -> UserResponse:
        """
        Insert a new user. Raises ConflictError when the email is taken,
        PersistenceError on any other database failure.
        """
        now = datetime.datetime.now(datetime.timezone.utc)
        new_user = User(
            email=email,
            full_name=full_name,
            created_at=now,
            updated_at=now
        )
        try:
            self.db.add(new_user)
            self.db.commit()
            self.db.refresh(new_user)
        except IntegrityError as e:
            # this catches the UNIQUE constraint violation on email
            self.db.rollback()
            raise ConflictError(
                errors={"email": EMAIL_EXISTS_MESSAGE},
                detail=f"Duplicate email on insert: {email}"
            ) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(detail=f"Error creating user: {e}") from e
        logger.info("Created user %s", new_user.id)
        return UserResponse.model_validate(new_user)
