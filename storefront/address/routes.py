# storefront/address/routes.py
from flask_jwt_extended import jwt_required

from ..extensions import db
from ..model import Address
from ..utils.api import ok
from ..utils.decorators import require_user
from ..utils.errors import NotFound
from ..utils.parsing import json_body
from ..utils.payloads import flag_field, text_fields
from . import bp


def _address_values(data: dict, creating=True) -> dict:
    values = text_fields(
        data,
        required=("city", "street", "building"),
        optional=("country", "zip_code"),
        creating=creating,
    )
    flag_field(data, "is_default", values, creating=creating, default=False)
    return values


def _own_address(user, address_id) -> Address:
    a = Address.query.filter_by(id=address_id, user_id=user.id).first()
    if not a:
        raise NotFound("Address not found")
    return a


def _make_default(user, address: Address):
    (Address.query
        .filter(Address.user_id == user.id, Address.id != address.id)
        .update({Address.is_default: False}, synchronize_session="fetch"))
    address.is_default = True


@bp.get("")
@jwt_required()
def list_addresses():
    user = require_user()
    items = (Address.query.filter_by(user_id=user.id)
             .order_by(Address.is_default.desc(), Address.id.asc()).all())
    return ok("Addresses", {"addresses": [a.as_dict() for a in items]})


@bp.get("/<int:address_id>")
@jwt_required()
def get_address(address_id):
    user = require_user()
    return ok("Address", {"address": _own_address(user, address_id).as_dict()})


@bp.post("")
@jwt_required()
def create_address():
    user = require_user()
    values = _address_values(json_body())
    is_default = values.pop("is_default")
    a = Address(user_id=user.id, is_default=False, **values)
    db.session.add(a)
    db.session.flush()
    # first address becomes the default
    if is_default or Address.query.filter_by(user_id=user.id).count() == 1:
        _make_default(user, a)
    db.session.commit()
    return ok("Address created", {"address": a.as_dict()}, status=201)


@bp.put("/<int:address_id>")
@bp.patch("/<int:address_id>")
@jwt_required()
def update_address(address_id):
    user = require_user()
    a = _own_address(user, address_id)
    values = _address_values(json_body(), creating=False)
    is_default = values.pop("is_default", None)
    for field, value in values.items():
        setattr(a, field, value)
    if is_default:
        _make_default(user, a)
    elif is_default is False:
        a.is_default = False
    db.session.commit()
    return ok("Address updated", {"address": a.as_dict()})


@bp.put("/<int:address_id>/set-default")
@jwt_required()
def set_default_address(address_id):
    user = require_user()
    a = _own_address(user, address_id)
    _make_default(user, a)
    db.session.commit()
    return ok("Default address set", {"address": a.as_dict()})


@bp.delete("/<int:address_id>")
@jwt_required()
def delete_address(address_id):
    user = require_user()
    a = _own_address(user, address_id)
    db.session.delete(a)
    db.session.commit()
    return ok("Address deleted", {"id": address_id})
