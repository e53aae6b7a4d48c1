# app.py - error help assistant backend
import logging

from flask import Flask
from flask_cors import CORS

from config import db, limiter, logger, flask_settings, AssistantConfig, PORT
from loop_guard import LoopGuard, build_store
from routes import bp
from seed_kb import seed_kb_command
from triage import TriageController


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_mapping(flask_settings())
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    CORS(app, resources={r"/*": {"origins": app.config["ALLOWED_ORIGIN"]}})
    db.init_app(app)
    limiter.init_app(app)

    loop_guard = LoopGuard(build_store(app.config["SESSION_STORE"]))
    app.extensions["triage"] = TriageController(loop_guard, AssistantConfig.from_mapping(app.config))

    app.register_blueprint(bp)
    app.cli.add_command(seed_kb_command)

    # create tables
    with app.app_context():
        db.create_all()

    logger.info("✅ Assistant ready (service=%s, session store=%s)",
                app.config["DEFAULT_SERVICE"], app.config["SESSION_STORE"])
    return app


# ---------- Run ----------
if __name__ == "__main__":
    # For local testing only; in production use gunicorn: `gunicorn "app:create_app()" --bind 0.0.0.0:$PORT --workers 2`
    create_app().run(host="0.0.0.0", port=PORT)
