# --- storefront/__init__.py ---
import logging

from flask import Flask, jsonify

from .config import Config
from .extensions import db, jwt, cors, migrate
from .logging_setup import configure_logging

logger = logging.getLogger(__name__)


def create_app(config_object=None):
    app = Flask(__name__, instance_relative_config=True)

    config_object = config_object or Config
    app.config.from_object(config_object)
    config_object.init_app(app)
    configure_logging(app)

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)
    cors.init_app(app, resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}})
    migrate.init_app(app, db)

    from .model import TokenBlocklist

    @jwt.token_in_blocklist_loader
    def _token_revoked(jwt_header, jwt_payload):
        return db.session.query(TokenBlocklist.id).filter_by(jti=jwt_payload["jti"]).first() is not None

    # Register blueprints
    from .auth import bp as auth_bp; app.register_blueprint(auth_bp)
    from .product import bp as product_bp; app.register_blueprint(product_bp)
    from .category import bp as category_bp; app.register_blueprint(category_bp)
    from .subcategory import bp as subcategory_bp; app.register_blueprint(subcategory_bp)
    from .brand import bp as brand_bp; app.register_blueprint(brand_bp)
    from .banner import bp as banner_bp; app.register_blueprint(banner_bp)
    from .cart import bp as cart_bp; app.register_blueprint(cart_bp)
    from .coupon import bp as coupon_bp; app.register_blueprint(coupon_bp)
    from .discount import bp as discount_bp; app.register_blueprint(discount_bp)
    from .order import bp as order_bp; app.register_blueprint(order_bp)
    from .review import bp as review_bp; app.register_blueprint(review_bp)
    from .address import bp as address_bp; app.register_blueprint(address_bp)

    from .utils.errors import register_error_handlers
    register_error_handlers(app)

    from .cli import register_cli
    register_cli(app)

    @app.get("/")
    def health():
        return jsonify(ok=True, msg="API running")

    with app.app_context():
        db.create_all()

    logger.debug("app created with %d blueprints", len(app.blueprints))
    return app
