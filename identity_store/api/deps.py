from fastapi import Depends
from sqlalchemy.orm import Session

from identity_store.db.session import get_db
from identity_store.repositories.user import UserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)
