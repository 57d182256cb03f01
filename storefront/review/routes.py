from flask import request
from flask_jwt_extended import jwt_required

from ..extensions import db
from ..model import Product, Review
from ..utils.api import ok, page_payload
from ..utils.decorators import require_user
from ..utils.errors import Forbidden, NotFound, ValidationError
from ..utils.parsing import json_body, paginate, parse_opt_int
from . import bp


def _rating(data: dict, errors: dict):
    v = data.get("rating")
    r = parse_opt_int(v)
    if r is None or not 1 <= r <= 5:
        errors["rating"] = "rating must be an integer between 1 and 5"
        return None
    return r


def _comment(data: dict, errors: dict):
    c = data.get("comment")
    if c is not None and not isinstance(c, str):
        errors["comment"] = "comment must be a string"
        return None
    return (c or "").strip() or None


def _owned_review(review_id):
    """Owner or admin only."""
    user = require_user()
    review = db.session.get(Review, review_id)
    if not review:
        raise NotFound("Review not found")
    if review.user_id != user.id and user.role != "admin":
        raise Forbidden("You can only change your own reviews")
    return review


@bp.get("")
@jwt_required()
def list_reviews():
    qry = Review.query
    product_id = parse_opt_int(request.args.get("product_id"))
    if product_id is not None:
        qry = qry.filter(Review.product_id == product_id)
    page_data = paginate(qry.order_by(Review.created_at.desc(), Review.id.desc()))
    return ok("Reviews", page_payload("reviews", page_data, Review.as_api))


@bp.get("/<int:review_id>")
@jwt_required()
def get_review(review_id):
    review = db.session.get(Review, review_id)
    if not review:
        raise NotFound("Review not found")
    return ok("Review", {"review": review.as_api()})


@bp.post("")
@jwt_required()
def create_review():
    user = require_user()
    data = json_body()
    errors = {}

    product_id = parse_opt_int(data.get("product_id"))
    if product_id is None:
        errors["product_id"] = "product_id is required"
    rating = _rating(data, errors)
    comment = _comment(data, errors)
    if errors:
        raise ValidationError(errors)

    if not db.session.get(Product, product_id):
        raise NotFound("Product not found")

    review = Review(user_id=user.id, product_id=product_id, rating=rating, comment=comment)
    db.session.add(review)
    db.session.commit()
    return ok("Review created", {"review": review.as_api()}, status=201)


@bp.put("/<int:review_id>")
@bp.patch("/<int:review_id>")
@jwt_required()
def update_review(review_id):
    review = _owned_review(review_id)
    data = json_body()
    errors = {}
    if "rating" in data:
        rating = _rating(data, errors)
        if rating is not None:
            review.rating = rating
    if "comment" in data:
        review.comment = _comment(data, errors)
    if errors:
        db.session.rollback()
        raise ValidationError(errors)
    db.session.commit()
    return ok("Review updated", {"review": review.as_api()})


@bp.delete("/<int:review_id>")
@jwt_required()
def delete_review(review_id):
    review = _owned_review(review_id)
    db.session.delete(review)
    db.session.commit()
    return ok("Review deleted", {"id": review_id})
