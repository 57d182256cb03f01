import logging

from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    get_jwt,
    jwt_required,
)
from werkzeug.security import check_password_hash, generate_password_hash

from . import bp
from ..extensions import db
from ..model import TokenBlocklist, User
from ..utils.api import ok
from ..utils.decorators import ROLE_LEVEL, can_manage, current_user_id, require_user, role_required
from ..utils.errors import Conflict, Forbidden, NotFound, Unauthorized, ValidationError
from ..utils.parsing import json_body
from ..utils.payloads import text_fields

logger = logging.getLogger(__name__)


# --- helper: create a token pair ---
def _issue_tokens(user: User) -> dict:
    identity = str(user.id)
    return {
        "token": create_access_token(identity=identity),
        "refresh_token": create_refresh_token(identity=identity),
    }


@bp.post("/register")
def register():
    data = json_body()
    errors = {}
    values = text_fields(data, required=("firstname", "lastname", "email"), errors=errors)
    password = data.get("password")
    if not isinstance(password, str) or len(password) < 6:
        errors["password"] = "Password required, min 6 chars"
    if "email" in values and "@" not in values["email"]:
        errors["email"] = "email is invalid"
    if errors:
        raise ValidationError(errors)

    email = values["email"].lower()
    if User.query.filter_by(email=email).first():
        raise Conflict("Email already registered")

    # Bootstrap: very first account becomes admin
    is_first_user = db.session.query(User.id).count() == 0
    user = User(
        firstname=values["firstname"],
        lastname=values["lastname"],
        email=email,
        password_hash=generate_password_hash(password),
        role="admin" if is_first_user else "user",
    )
    db.session.add(user)
    db.session.commit()
    logger.info("user %s registered (role=%s)", user.id, user.role)

    return ok("Account created successfully", {
        "user": user.as_dict(),
        "user_logged_in": True,
        **_issue_tokens(user),
    }, status=201)


@bp.post("/login")
def login():
    data = json_body()
    email = (data.get("email") or "").strip().lower() if isinstance(data.get("email"), str) else ""
    password = data.get("password") if isinstance(data.get("password"), str) else ""
    if not email or not password:
        raise ValidationError({"credentials": "Email and password are required"},
                              message="Email and password are required")

    user = User.query.filter_by(email=email).first()
    if not user or not check_password_hash(user.password_hash, password):
        raise Unauthorized("Invalid email or password")

    return ok("You've logged in successfully", {
        "user": user.as_dict(),
        "user_logged_in": True,
        **_issue_tokens(user),
    })


@bp.post("/refresh")
@jwt_required(refresh=True)
def refresh():
    uid = current_user_id()
    if not uid or not db.session.get(User, uid):
        raise Unauthorized("user not found")
    return ok("Token refreshed", {"token": create_access_token(identity=str(uid))})


@bp.post("/logout")
@jwt_required(verify_type=False)
def logout():
    claims = get_jwt()
    db.session.add(TokenBlocklist(jti=claims["jti"]))
    db.session.commit()
    return ok("Logged out", {"revoked": claims.get("type", "access")})


@bp.get("/me")
@jwt_required()
def me():
    user = require_user()
    return ok("Profile", {"user": user.as_dict()})


@bp.patch("/users/<int:user_id>/role")
@role_required("admin")
def update_user_role(user_id):
    actor = require_user()
    new_role = json_body().get("role")
    new_role = new_role.strip().lower() if isinstance(new_role, str) else ""
    if new_role not in ROLE_LEVEL:
        raise ValidationError({"role": "Invalid role"}, message="Invalid role")

    target = db.session.get(User, user_id)
    if not target:
        raise NotFound("User not found")

    # admins manage managers and users; the only admin acting on an admin is self-demotion
    if target.id != actor.id and not can_manage(actor, target):
        raise Forbidden("Cannot change the role of another admin")

    # Prevent demoting the LAST admin
    if target.role == "admin" and new_role != "admin":
        admin_count = db.session.query(User).filter_by(role="admin").count()
        if admin_count <= 1:
            raise ValidationError({"role": "Cannot demote the last admin"},
                                  message="Cannot demote the last admin")

    target.role = new_role
    db.session.commit()
    logger.info("user %s role set to %s by %s", target.id, new_role, actor.id)
    return ok("Role updated", {"user": target.as_dict()})
