# schemas/common.py
"""
Shared response schemas.
"""
from typing import List
from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
     """Body returned by the service-error handlers in main.py."""
     error: str
     detail: str
     errors: List[str] = []

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "error": "invalid_state",
                    "detail": "Only pending rental requests can be approved",
                    "errors": []
               }
          }
     )


class ValidationResultResponse(BaseModel):
     """Aggregated business-rule check; every violation is listed."""
     is_valid: bool
     errors: List[str]
