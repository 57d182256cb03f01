# storefront/utils/errors.py
from __future__ import annotations
import logging

from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from .api import err

logger = logging.getLogger(__name__)

COUPON_ERROR_MESSAGE = "Invalid or expired coupon"


class ApiError(Exception):
    status_code = 400
    default_message = "Bad request"

    def __init__(self, message: str | None = None, data: dict | None = None, status_code: int | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.data = data
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    """Malformed input. ``errors`` maps field name -> message."""
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: dict[str, str], message: str | None = None):
        self.errors = dict(errors)
        super().__init__(message, data={"errors": self.errors})


class InvalidCoupon(ApiError):
    """Every rejection reason collapses to one message; ``reason`` is for logs only."""
    status_code = 400
    default_message = COUPON_ERROR_MESSAGE

    def __init__(self, reason: str = "invalid", message: str | None = None):
        self.reason = reason
        super().__init__(message)


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class Conflict(ApiError):
    status_code = 409
    default_message = "Conflict"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Forbidden"


def register_error_handlers(app):
    from ..extensions import db, jwt

    @app.errorhandler(ApiError)
    def handle_api_error(e: ApiError):
        db.session.rollback()
        return err(e.message, e.status_code, e.data)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(e: IntegrityError):
        db.session.rollback()
        logger.info("integrity error: %s", e.orig)
        return err("Duplicate or invalid data", 409)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return err(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        db.session.rollback()
        logger.exception("unhandled error")
        return err("Internal server error", 500)

    # ---- JWT failures -> same envelope, 401 ----
    @jwt.unauthorized_loader
    def _missing_token(reason):
        return err(reason or "Missing token", 401)

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        return err(reason or "Invalid token", 401)

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return err("Token has expired", 401)

    @jwt.revoked_token_loader
    def _revoked_token(jwt_header, jwt_payload):
        return err("Token has been revoked", 401)
