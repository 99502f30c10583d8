import os
from datetime import timedelta

class Config:
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False
    ENV = os.getenv("FLASK_ENV", "development")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-secret-change-me")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=1)

    # orders
    HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "20"))

    # notification gateway; push is skipped when no URL is configured
    PUSH_GATEWAY_URL = os.getenv("PUSH_GATEWAY_URL")
    PUSH_TIMEOUT = float(os.getenv("PUSH_TIMEOUT", "5"))

    API_UTC_OFFSET_HOURS = int(os.getenv("API_UTC_OFFSET_HOURS", "8"))  # Asia/Manila
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    @staticmethod
    def init_app(app):
        if app.config.get("SQLALCHEMY_DATABASE_URI"):
            return
        if not os.getenv("DATABASE_URL"):
            os.makedirs(app.instance_path, exist_ok=True)
            app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{os.path.join(app.instance_path, 'laundrygo.db')}"
        else:
            app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv("DATABASE_URL")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    PUSH_GATEWAY_URL = None
    HISTORY_LIMIT = 20
