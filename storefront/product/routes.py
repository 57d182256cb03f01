from flask import request, url_for
from sqlalchemy import or_, desc, asc

from ..extensions import db
from ..model import Brand, Category, Product, SubCategory
from ..utils.api import ok
from ..utils.decorators import role_required
from ..utils.errors import NotFound, ValidationError
from ..utils.money import parse_money
from ..utils.parsing import json_body, paginate, parse_bool, parse_opt_float, parse_opt_int
from ..utils.payloads import flag_field, text_fields
from . import bp

# ---------- helpers ----------
def _ep(name: str) -> str:
    return f"{bp.name}.{name}"


def _sort_products(query, sort):
    sort = (sort or "").strip()
    mapping = {
        "id": asc(Product.id),   "-id": desc(Product.id),
        "name": asc(Product.name_en), "-name": desc(Product.name_en),
        "price": asc(Product.price), "-price": desc(Product.price),
    }
    col = mapping.get(sort, desc(Product.id))  # default newest first (id desc)
    return query.order_by(col)


def _string_list(v, field, errors):
    if v is None:
        return []
    if not isinstance(v, list) or not all(isinstance(x, str) and x.strip() for x in v):
        errors[field] = f"{field} must be a list of strings"
        return None
    return [x.strip() for x in v]


def _fk(model, data, field, errors, required):
    if field not in data:
        if required:
            errors[field] = f"{field} is required"
        return None
    raw = data.get(field)
    if raw is None and not required:
        return None
    fid = parse_opt_int(raw)
    if fid is None:
        errors[field] = f"{field} must be an integer"
        return None
    if not db.session.get(model, fid):
        raise NotFound(f"{model.__name__} {fid} not found")
    return fid


def _product_values(data: dict, product: Product | None = None) -> dict:
    creating = product is None
    errors = {}
    values = text_fields(
        data,
        required=("name_en", "name_ar"),
        optional=("description_en", "description_ar", "image"),
        creating=creating,
        errors=errors,
    )

    if creating or "price" in data:
        price = parse_money(data.get("price"))
        if price is None:
            errors["price"] = "price must be numeric"
        elif price < 0:
            errors["price"] = "price must be >= 0"
        else:
            values["price"] = price

    for field in ("colors", "sizes"):
        if field in data:
            lst = _string_list(data.get(field), field, errors)
            if lst is not None:
                values[field] = lst
        elif creating:
            values[field] = []

    flag_field(data, "status", values, creating=creating)

    for field, model, required in (
        ("category_id", Category, creating),
        ("brand_id", Brand, creating),
        ("subcategory_id", SubCategory, False),
    ):
        fid = _fk(model, data, field, errors, required)
        if fid is not None or (field == "subcategory_id" and field in data and data.get(field) is None):
            values[field] = fid

    if errors:
        raise ValidationError(errors)

    sub_id = values.get("subcategory_id", getattr(product, "subcategory_id", None))
    cat_id = values.get("category_id", getattr(product, "category_id", None))
    if sub_id is not None and db.session.get(SubCategory, sub_id).category_id != cat_id:
        raise ValidationError({"subcategory_id": "subcategory does not belong to the category"})
    return values

# ---------- routes ----------

# GET /api/products
@bp.get("")
def list_products():
    """
    Query params:
      q              -> substring match on name_en/name_ar
      category_id    -> int
      subcategory_id -> int
      brand_id       -> int
      min_price      -> float
      max_price      -> float
      status         -> bool (default: active only)
      sort           -> id, -id, name, -name, price, -price
      page           -> int, default 1
      per_page       -> int, default 15 (cap 100)
    """
    query = Product.query

    q = (request.args.get("q") or "").strip()
    if q:
        like = f"%{q}%"
        query = query.filter(or_(Product.name_en.ilike(like), Product.name_ar.ilike(like)))

    for field in ("category_id", "subcategory_id", "brand_id"):
        v = parse_opt_int(request.args.get(field))
        if v is not None:
            query = query.filter(getattr(Product, field) == v)

    min_price = parse_opt_float(request.args.get("min_price"))
    max_price = parse_opt_float(request.args.get("max_price"))
    if min_price is not None:
        query = query.filter(Product.price >= min_price)
    if max_price is not None:
        query = query.filter(Product.price <= max_price)

    status = request.args.get("status")
    query = query.filter(Product.status == (parse_bool(status) if status is not None else True))

    query = _sort_products(query, request.args.get("sort"))
    page_data = paginate(query)

    return ok("Products fetched", {
        "items": [p.as_api() for p in page_data["items"]],
        "meta": page_data["meta"],
    })


# GET /api/products/<id>
@bp.get("/<int:pid>")
def get_product(pid):
    product = Product.query.get_or_404(pid, description="Product not found")
    return ok("Product fetched", product.as_api())


@bp.get("/category/<int:category_id>")
def products_by_category(category_id):
    Category.query.get_or_404(category_id, description="Category not found")
    page_data = paginate(_sort_products(Product.query.filter_by(category_id=category_id, status=True), request.args.get("sort")))
    return ok("Products fetched", {
        "items": [p.as_api() for p in page_data["items"]],
        "meta": page_data["meta"],
    })


@bp.get("/brand/<int:brand_id>")
def products_by_brand(brand_id):
    Brand.query.get_or_404(brand_id, description="Brand not found")
    page_data = paginate(_sort_products(Product.query.filter_by(brand_id=brand_id, status=True), request.args.get("sort")))
    return ok("Products fetched", {
        "items": [p.as_api() for p in page_data["items"]],
        "meta": page_data["meta"],
    })


# POST /api/products
@bp.post("")
@role_required("admin")
def create_product():
    product = Product(**_product_values(json_body()))
    db.session.add(product)
    db.session.commit()

    resp = ok("Product created", product.as_api(), status=201)
    resp.headers["Location"] = url_for(_ep("get_product"), pid=product.id, _external=True)
    return resp


# PUT /api/products/<id>
@bp.put("/<int:pid>")
@bp.patch("/<int:pid>")
@role_required("admin")
def update_product(pid):
    product = Product.query.get_or_404(pid, description="Product not found")
    for field, value in _product_values(json_body(), product).items():
        setattr(product, field, value)
    db.session.commit()
    return ok("Product updated", product.as_api())


# DELETE /api/products/<id>
@bp.delete("/<int:pid>")
@role_required("admin")
def delete_product(pid):
    product = Product.query.get_or_404(pid, description="Product not found")
    db.session.delete(product)
    db.session.commit()
    return ok(f"Product {pid} deleted", {"id": pid})
