# --- brand/routes.py ---
from flask import request
from sqlalchemy import or_

from ..extensions import db
from ..model import Brand, Product
from ..utils.api import ok
from ..utils.decorators import role_required
from ..utils.errors import Conflict
from ..utils.parsing import json_body, paginate
from ..utils.payloads import bilingual_fields
from . import bp


@bp.get("")
def list_brands():
    q = (request.args.get("q") or "").strip()
    qry = Brand.query
    if q:
        qry = qry.filter(or_(Brand.name_en.ilike(f"%{q}%"), Brand.name_ar.ilike(f"%{q}%")))
    page_data = paginate(qry.order_by(Brand.name_en.asc()))
    return ok("Brands", {
        "brands": [b.as_dict() for b in page_data["items"]],
        "meta": page_data["meta"],
    })


@bp.get("/<int:bid>")
def get_brand(bid):
    b = Brand.query.get_or_404(bid, description="Brand not found")
    return ok("Brand", {"brand": b.as_dict()})


@bp.post("")
@role_required("admin")
def create_brand():
    b = Brand(**bilingual_fields(json_body()))
    db.session.add(b)
    db.session.commit()
    return ok("Brand created", {"brand": b.as_dict()}, status=201)


@bp.put("/<int:bid>")
@role_required("admin")
def update_brand(bid):
    b = Brand.query.get_or_404(bid, description="Brand not found")
    for field, value in bilingual_fields(json_body(), creating=False).items():
        setattr(b, field, value)
    db.session.commit()
    return ok("Brand updated", {"brand": b.as_dict()})


@bp.delete("/<int:bid>")
@role_required("admin")
def delete_brand(bid):
    b = Brand.query.get_or_404(bid, description="Brand not found")
    if Product.query.filter_by(brand_id=bid).first():
        raise Conflict("cannot delete: brand has products")
    db.session.delete(b)
    db.session.commit()
    return ok("Brand deleted", {"id": bid})
