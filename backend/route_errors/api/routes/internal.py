from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from route_errors.api.deps import get_db
from route_errors.core.conversion import internal_from_failure
from route_errors.schemas import ErrorResponse, UserRead
from route_errors.services.users import get_user

router = APIRouter()


@router.get(
    "/users/{username}",
    response_model=UserRead,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def inspect_user(username: str, db: Session = Depends(get_db)):
    # Trusted callers get the failure detail under "internal_error"
    try:
        return get_user(db, username)
    except Exception as exc:
        raise internal_from_failure(exc) from exc
