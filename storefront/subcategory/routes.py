# --- subcategory/routes.py ---
from ..extensions import db
from ..model import Category, SubCategory
from ..utils.api import ok
from ..utils.decorators import role_required
from ..utils.errors import NotFound, ValidationError
from ..utils.parsing import json_body, paginate, parse_opt_int
from ..utils.payloads import bilingual_fields
from . import bp


def _category_id(data: dict, required: bool):
    if "category_id" not in data and not required:
        return None
    cid = parse_opt_int(data.get("category_id"))
    if cid is None:
        raise ValidationError({"category_id": "category_id is required"})
    if not db.session.get(Category, cid):
        raise NotFound(f"Category {cid} not found")
    return cid


@bp.get("")
def list_subcategories():
    page_data = paginate(SubCategory.query.order_by(SubCategory.id.asc()))
    return ok("Sub-categories", {
        "subcategories": [s.as_dict() for s in page_data["items"]],
        "meta": page_data["meta"],
    })


@bp.get("/<int:sid>")
def get_subcategory(sid):
    s = SubCategory.query.get_or_404(sid, description="Sub-category not found")
    return ok("Sub-category", {"subcategory": s.as_dict()})


@bp.get("/category/<int:category_id>")
def subcategories_by_category(category_id):
    Category.query.get_or_404(category_id, description="Category not found")
    items = SubCategory.query.filter_by(category_id=category_id).order_by(SubCategory.id.asc()).all()
    return ok("Sub-categories", {"subcategories": [s.as_dict() for s in items]})


@bp.post("")
@role_required("admin")
def create_subcategory():
    data = json_body()
    values = bilingual_fields(data)
    values["category_id"] = _category_id(data, required=True)
    s = SubCategory(**values)
    db.session.add(s)
    db.session.commit()
    return ok("Sub-category created", {"subcategory": s.as_dict()}, status=201)


@bp.put("/<int:sid>")
@role_required("admin")
def update_subcategory(sid):
    s = SubCategory.query.get_or_404(sid, description="Sub-category not found")
    data = json_body()
    values = bilingual_fields(data, creating=False)
    cid = _category_id(data, required=False)
    if cid is not None:
        values["category_id"] = cid
    for field, value in values.items():
        setattr(s, field, value)
    db.session.commit()
    return ok("Sub-category updated", {"subcategory": s.as_dict()})


@bp.delete("/<int:sid>")
@role_required("admin")
def delete_subcategory(sid):
    s = SubCategory.query.get_or_404(sid, description="Sub-category not found")
    db.session.delete(s)
    db.session.commit()
    return ok("Sub-category deleted", {"id": sid})
