import logging
import os

from flask import Flask, jsonify

from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from verifier_routes import verifier_bp, init_verifier_bp


DEFAULT_CONFIG = {
    "DB_PATH": "db.json",
    "DB_IN_MEMORY": False,
    "SECRET_KEY": "key",
    "GAS_LIMIT": None,
    "LOG_LEVEL": "INFO",
}


def load_env_config():
    """환경 변수에서 설정을 읽는다."""
    config = {}
    if os.environ.get("VERIFIER_DB_PATH"):
        config["DB_PATH"] = os.environ["VERIFIER_DB_PATH"]
    if os.environ.get("VERIFIER_SECRET_KEY"):
        config["SECRET_KEY"] = os.environ["VERIFIER_SECRET_KEY"]
    if os.environ.get("VERIFIER_GAS_LIMIT"):
        config["GAS_LIMIT"] = int(os.environ["VERIFIER_GAS_LIMIT"])
    if os.environ.get("VERIFIER_LOG_LEVEL"):
        config["LOG_LEVEL"] = os.environ["VERIFIER_LOG_LEVEL"]
    return config


def open_db(config):
    if config["DB_IN_MEMORY"]:
        return TinyDB(storage=MemoryStorage)   # Memory DB
    return TinyDB(config["DB_PATH"])           # Storage DB


def create_app(config=None):
    """Flask 앱을 만든다.

    설정 우선순위: 기본값 < 환경 변수 < config 인자.
    """
    app = Flask(__name__)
    app.config.update(DEFAULT_CONFIG)
    app.config.update(load_env_config())
    if config:
        app.config.update(config)
    app.secret_key = app.config["SECRET_KEY"]

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db = open_db(app.config)
    app.extensions["tinydb"] = db
    init_verifier_bp(db)
    app.register_blueprint(verifier_bp)

    @app.route("/")
    def index():
        return jsonify({"service": "tokamak-verifier",
                        "variants": ["two_round", "three_round", "public_commitment"]})

    return app


if __name__ == "__main__":
    create_app().run()
