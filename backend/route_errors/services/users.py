from sqlalchemy.orm import Session

from route_errors.db import models


class UserNotFound(LookupError):
    """Raised when no user has the requested username."""

    def __init__(self, username: str):
        super().__init__(f"User {username!r} not found")
        self.username = username


class UsernameTaken(ValueError):
    """Raised when creating a user whose username already exists."""

    def __init__(self, username: str):
        super().__init__(f"Username {username!r} is already taken")
        self.username = username


def find_user(db: Session, username: str):
    return db.query(models.User).filter(models.User.username == username).first()


def get_user(db: Session, username: str) -> models.User:
    user = find_user(db, username)
    if user is None:
        raise UserNotFound(username)
    return user


def create_user(db: Session, username: str, display_name=None) -> models.User:
    if find_user(db, username) is not None:
        raise UsernameTaken(username)
    user = models.User(username=username, display_name=display_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user: models.User) -> None:
    db.delete(user)
    db.commit()
