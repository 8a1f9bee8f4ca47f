# services/exceptions.py
"""
Error taxonomy raised by the service layer.

Routers do not catch these; main.py registers one exception handler per
class and maps it to an HTTP status:

     NotFoundError          -> 404
     UnauthorizedError      -> 403
     InvalidStateError      -> 409
     RentalValidationError  -> 400 (carries the full list of rule violations)
     UnexpectedError        -> 500
"""
from typing import List, Optional


class RentalsError(Exception):
     """Base class for every error the rental services raise on purpose."""
     kind = "error"

     def __init__(self, message: str):
          super().__init__(message)
          self.message = message


class NotFoundError(RentalsError):
     kind = "not_found"

     @classmethod
     def for_entity(cls, entity: str, entity_id: int) -> "NotFoundError":
          return cls(f"{entity} {entity_id} not found")


class UnauthorizedError(RentalsError):
     kind = "forbidden"


class InvalidStateError(RentalsError):
     kind = "invalid_state"


class ConcurrencyConflictError(InvalidStateError):
     """Another transaction changed the same rows first."""
     kind = "conflict"


class RentalValidationError(RentalsError):
     kind = "validation_failed"

     def __init__(self, errors: List[str], message: Optional[str] = None):
          super().__init__(message or "Invalid rental request: " + ", ".join(errors))
          self.errors = list(errors)


class UnexpectedError(RentalsError):
     kind = "unexpected"
