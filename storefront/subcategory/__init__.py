from flask import Blueprint

bp = Blueprint("subcategory", __name__, url_prefix="/api/subcategories")

from . import routes  # noqa: E402,F401
