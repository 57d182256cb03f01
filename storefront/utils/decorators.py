# ------- storefront/utils/decorators.py -------
from functools import wraps
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from ..extensions import db
from ..model.user import User
from .errors import Forbidden, Unauthorized

ROLE_LEVEL = {"user": 1, "manager": 2, "admin": 3}


def current_user_id() -> int | None:
    uid = get_jwt_identity()
    try:
        return int(uid)
    except (TypeError, ValueError):
        return None


def current_user() -> User | None:
    verify_jwt_in_request()
    uid = current_user_id()
    return db.session.get(User, uid) if uid else None


def require_user() -> User:
    u = current_user()
    if not u:
        raise Unauthorized()
    return u


def role_required(*roles, message: str | None = None):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            u = require_user()
            if u.role not in roles:
                raise Forbidden(message)
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def role_at_least(min_role: str, message: str | None = None):  # admin > manager > user
    min_level = ROLE_LEVEL[min_role]
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            u = require_user()
            if ROLE_LEVEL.get(u.role, 0) < min_level:
                raise Forbidden(message)
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def is_staff(user: User | None) -> bool:
    return bool(user) and ROLE_LEVEL.get(user.role, 0) >= ROLE_LEVEL["manager"]


def can_manage(actor: User, target: User) -> bool:
    if not actor or not target:
        return False
    return ROLE_LEVEL[actor.role] > ROLE_LEVEL[target.role]
