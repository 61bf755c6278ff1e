"""Academic rules shared by every blueprint.

Each operation takes the acting :class:`~app.services.permissions.Principal`
explicitly and returns an :class:`~app.services.results.Ok` or
:class:`~app.services.results.Err` instead of raising for expected failures.
"""
from .results import Ok, Err, ErrorKind
from .permissions import Principal, Role

__all__ = ["Ok", "Err", "ErrorKind", "Principal", "Role"]
