from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from route_errors.api.deps import get_db
from route_errors.core.conversion import conversions
from route_errors.core.errors import RouteError
from route_errors.core.logging import logger
from route_errors.schemas import ErrorResponse, UserCreate, UserLookup, UserRead
from route_errors.services.users import (
    UserNotFound,
    UsernameTaken,
    create_user,
    delete_user,
    find_user,
    get_user,
)

router = APIRouter()

ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@conversions.register(UserNotFound)
def _user_not_found(exc: UserNotFound) -> RouteError:
    return RouteError.not_found().with_data(UserLookup(username=exc.username))


@conversions.register(UsernameTaken)
def _username_taken(exc: UsernameTaken) -> RouteError:
    return RouteError.conflict().with_data(UserLookup(username=exc.username))


@router.post("/", response_model=UserRead, status_code=201, responses=ERROR_RESPONSES)
def register_user(payload: UserCreate, db: Session = Depends(get_db)):
    user = create_user(db, payload.username, payload.display_name)
    logger.info("Created user %s", user.id)
    return user


@router.get("/{username}", response_model=UserRead, responses=ERROR_RESPONSES)
def read_user(username: str, db: Session = Depends(get_db)):
    return get_user(db, username)


@router.delete("/{username}", status_code=204, responses=ERROR_RESPONSES)
def remove_user(username: str, db: Session = Depends(get_db)):
    user = find_user(db, username)
    if user is None:
        raise RouteError.not_found().with_message(f"No user named {username}")
    delete_user(db, user)
    return Response(status_code=204)
