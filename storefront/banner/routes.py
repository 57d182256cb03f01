# --- banner/routes.py ---
from flask import request

from ..extensions import db
from ..model import Banner
from ..utils.api import ok
from ..utils.decorators import role_required
from ..utils.errors import ValidationError
from ..utils.parsing import json_body, parse_bool, parse_opt_int
from ..utils.payloads import flag_field, text_fields
from . import bp


def _banner_values(data: dict, creating=True) -> dict:
    errors = {}
    values = text_fields(
        data,
        required=("title", "title_ar", "image"),
        optional=("description", "description_ar", "link_url"),
        creating=creating,
        errors=errors,
    )
    if "order" in data:
        if data.get("order") is None:
            values["order"] = None
        else:
            pos = parse_opt_int(data.get("order"))
            if pos is None:
                errors["order"] = "order must be an integer"
            else:
                values["order"] = pos
    flag_field(data, "is_active", values, creating=creating)
    if errors:
        raise ValidationError(errors)
    return values


@bp.get("")
def list_banners():
    qry = Banner.query
    # storefront shows active banners only unless ?all=1
    if not parse_bool(request.args.get("all")):
        qry = qry.filter(Banner.is_active.is_(True))
    items = qry.order_by(Banner.order.is_(None), Banner.order.asc(), Banner.id.asc()).all()
    return ok("Banners", {"banners": [b.as_dict() for b in items]})


@bp.get("/<int:banner_id>")
def get_banner(banner_id):
    b = Banner.query.get_or_404(banner_id, description="Banner not found")
    return ok("Banner", {"banner": b.as_dict()})


@bp.post("")
@role_required("admin")
def create_banner():
    b = Banner(**_banner_values(json_body()))
    db.session.add(b)
    db.session.commit()
    return ok("Banner created", {"banner": b.as_dict()}, status=201)


@bp.put("/<int:banner_id>")
@bp.patch("/<int:banner_id>")
@role_required("admin")
def update_banner(banner_id):
    b = Banner.query.get_or_404(banner_id, description="Banner not found")
    for field, value in _banner_values(json_body(), creating=False).items():
        setattr(b, field, value)
    db.session.commit()
    return ok("Banner updated", {"banner": b.as_dict()})


@bp.delete("/<int:banner_id>")
@role_required("admin")
def delete_banner(banner_id):
    b = Banner.query.get_or_404(banner_id, description="Banner not found")
    db.session.delete(b)
    db.session.commit()
    return ok("Banner deleted", {"id": banner_id})
