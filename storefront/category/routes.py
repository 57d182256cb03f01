# --- category/routes.py ---
from flask import request
from sqlalchemy import or_, desc

from ..extensions import db
from ..model import Category, Product
from ..utils.api import ok
from ..utils.decorators import role_required
from ..utils.errors import Conflict
from ..utils.parsing import json_body, paginate
from ..utils.payloads import bilingual_fields
from . import bp

# ------------------------ CATEGORY ROUTES ------------------------

@bp.get("")
def list_categories():
    """
    q        -> substring match on name_en / name_ar
    sort     -> name, -name, id, -id
    page     -> default 1
    per_page -> default 15 (cap 100)
    """
    q = (request.args.get("q") or "").strip()
    sort = (request.args.get("sort") or "name").strip()

    qry = Category.query
    if q:
        qry = qry.filter(or_(Category.name_en.ilike(f"%{q}%"), Category.name_ar.ilike(f"%{q}%")))

    sort_map = {
        "id": Category.id,
        "-id": desc(Category.id),
        "name": Category.name_en,
        "-name": desc(Category.name_en),
    }
    qry = qry.order_by(sort_map.get(sort, Category.name_en))
    page_data = paginate(qry)

    return ok("Categories", {
        "categories": [c.as_dict() for c in page_data["items"]],
        "meta": page_data["meta"],
    })


@bp.get("/<int:cid>")
def get_category(cid):
    c = Category.query.get_or_404(cid, description="Category not found")
    return ok("Category", {"category": c.as_dict()})


@bp.post("")
@role_required("admin")
def create_category():
    values = bilingual_fields(json_body())
    if Category.query.filter(Category.name_en.ilike(values["name_en"])).first():
        raise Conflict("category name already exists")
    c = Category(**values)
    db.session.add(c)
    db.session.commit()
    return ok("Category created", {"category": c.as_dict()}, status=201)


@bp.put("/<int:cid>")
@role_required("admin")
def update_category(cid):
    c = Category.query.get_or_404(cid, description="Category not found")
    values = bilingual_fields(json_body(), creating=False)
    if "name_en" in values:
        exists = Category.query.filter(
            Category.name_en.ilike(values["name_en"]), Category.id != c.id
        ).first()
        if exists:
            raise Conflict("category name already exists")
    for field, value in values.items():
        setattr(c, field, value)
    db.session.commit()
    return ok("Category updated", {"category": c.as_dict()})


@bp.delete("/<int:cid>")
@role_required("admin")
def delete_category(cid):
    c = Category.query.get_or_404(cid, description="Category not found")
    if Product.query.filter_by(category_id=cid).first():
        raise Conflict("cannot delete: category has products")
    db.session.delete(c)
    db.session.commit()
    return ok("Category deleted", {"id": cid})
