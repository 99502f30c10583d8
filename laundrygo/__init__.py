import logging
from flask import Flask, jsonify
from .extensions import db, jwt, cors, migrate
from .config import Config

def create_app(config_object=None):
    app = Flask(__name__, instance_relative_config=True)

    config_object = config_object or Config
    app.config.from_object(config_object)
    config_object.init_app(app)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)
    cors.init_app(app, resources={r"/*": {"origins": "*"}})
    migrate.init_app(app, db)

    # Register blueprints
    from .order import bp as order_bp; app.register_blueprint(order_bp)
    from .notification import bp as notification_bp; app.register_blueprint(notification_bp)

    from .errors import register_error_handlers
    register_error_handlers(app)

    from .cli import register_cli
    register_cli(app)

    @app.get("/")
    def health():
        return jsonify(ok=True, msg="API running")

    with app.app_context():
        from . import model  # noqa: F401  (register tables)
        db.create_all()
        app.logger.info("blueprints: %s", sorted(app.blueprints.keys()))

    return app
