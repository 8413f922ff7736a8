from .users import UserCreate, UserRead, UserLookup
from .errors import ErrorResponse, InternalErrorDetail
