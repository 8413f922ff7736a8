from typing import Any, Dict, Optional
from pydantic import BaseModel
from pydantic import ConfigDict


class InternalErrorDetail(BaseModel):
    """
    Description of the failure behind an internal error.
    - name: the failure's display text
    - debug: the failure's debug representation
    """

    name: str
    debug: str


class ErrorResponse(BaseModel):
    """
    Canonical API error payload.
    - error: public human-readable message, always present
    - internal_error: implementation detail, internal endpoints only
    Payload fields are merged at the top level, so extra keys are allowed.
    """

    error: str
    internal_error: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="allow")
