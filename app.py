from flask import Flask
from config import SECRET_KEY, MAX_CONTENT_LENGTH, IS_PRODUCTION, APP_STAGE, RATELIMIT_ENABLED
from extensions import limiter

# Blueprints
from routes.print_layout import print_layout_bp


def create_app(test_config=None):
    app = Flask(__name__)

    # Apply Test Config Overrides (Early)
    if test_config:
        app.config.update(test_config)

    app.config['SECRET_KEY'] = SECRET_KEY
    app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH
    app.config.setdefault('RATELIMIT_ENABLED', RATELIMIT_ENABLED)

    # Setup Structured Logging
    from utils.logger import setup_logger
    setup_logger(app)

    # Simple ping endpoint for Docker health checks
    @app.route("/ping")
    def ping():
        return {"status": "ok", "stage": APP_STAGE}, 200

    # Extensions
    limiter.init_app(app)

    # Blueprints
    app.register_blueprint(print_layout_bp)

    if not IS_PRODUCTION:
        app.logger.info(f"[App] Started in {APP_STAGE} stage")

    return app


# WSGI Entry Point
app = create_app()

if __name__ == "__main__":
    app.run(host='0.0.0.0', debug=True)
