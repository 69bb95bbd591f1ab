from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar, Any, cast
from flask import current_app, jsonify

F = TypeVar("F", bound=Callable[..., Any])


class AccountsError(Exception):
    """Base for errors a view turns into a JSON ``{"error": ...}`` reply."""

    status_code = 500


def json_errors(func: F) -> F:
    """Decorator mapping :class:`AccountsError` subclasses to JSON responses.

    - The reply body is ``{"error": str(exc)}``.
    - The HTTP status comes from the exception's ``status_code``.

    Anything else propagates to Flask's normal error handling.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        try:
            return func(*args, **kwargs)
        except AccountsError as e:
            current_app.logger.warning("%s: %s", type(e).__name__, e)
            return jsonify({"error": str(e)}), e.status_code

    return cast(F, wrapper)
