import enum
from dataclasses import dataclass
from typing import Any


class ErrorKind(str, enum.Enum):
    UNAUTHORIZED = "unauthorized"          # no principal
    FORBIDDEN = "forbidden"                # principal lacks role/relationship
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    ALREADY_EXISTS = "already_exists"
    INCOMPLETE_PROFILE = "incomplete_profile"


HTTP_STATUS = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 422,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.INCOMPLETE_PROFILE: 422,
}


@dataclass(frozen=True)
class Ok:
    value: Any = None
    ok = True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str
    ok = False

    @property
    def status_code(self):
        return HTTP_STATUS[self.kind]
