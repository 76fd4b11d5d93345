# app.py: Portal de Proveedores IDI backend-API (registro + documentos + avisos)
import os, logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from flask import Flask, jsonify
from flask_cors import CORS

from errors import ConfigError
from extensions import db

BASE_DIR = Path(__file__).resolve().parent


def _database_url():
    raw = os.environ.get("DATABASE_URL")
    if not raw:
        return None
    if raw.startswith("postgres://"):
        raw = raw.replace("postgres://", "postgresql+psycopg2://", 1)
    elif raw.startswith("postgresql://"):
        raw = raw.replace("postgresql://", "postgresql+psycopg2://", 1)
    if "sslmode=" not in raw and "+psycopg2://" in raw:
        raw += ("&" if "?" in raw else "?") + "sslmode=require"
    return raw


ENGINE_OPTIONS = {"pool_pre_ping": True, "pool_recycle": 300}


def _env_config():
    return dict(
        SQLALCHEMY_DATABASE_URI=_database_url(),
        # Correo (Resend)
        RESEND_API_KEY=os.getenv("RESEND_API_KEY") or os.getenv("RESEND2_API_KEY"),
        RESEND_ENDPOINT=os.getenv("RESEND_ENDPOINT", "https://api.resend.com/emails"),
        ADMIN_EMAIL=os.getenv("ADMIN_EMAIL", "proyectos@fundacionidi.org"),
        MAIL_FROM_ADMIN=os.getenv("MAIL_FROM_ADMIN", "Portal IDI <onboarding@resend.dev>"),
        MAIL_FROM_PROVEEDOR=os.getenv("MAIL_FROM_PROVEEDOR", "Fundación IDI <onboarding@resend.dev>"),
        CONTACT_PHONE=os.getenv("CONTACT_PHONE", "3175103393"),
        # Documentos (S3)
        S3_BUCKET=os.getenv("S3_BUCKET"),
        AWS_REGION=os.getenv("AWS_REGION", "us-east-1"),
        S3_ENDPOINT_URL=os.getenv("S3_ENDPOINT_URL"),
        S3_PREFIX=os.getenv("S3_PREFIX", "portal_idi"),
        S3_PUBLIC_BASE_URL=os.getenv("S3_PUBLIC_BASE_URL"),
        # Sesión
        JWT_SECRET=os.getenv("JWT_SECRET"),
        AUTH_COOKIE_NAME=os.getenv("AUTH_COOKIE_NAME", "authToken"),
        # Timeouts / límites
        UPLOAD_TIMEOUT_SECONDS=float(os.getenv("UPLOAD_TIMEOUT_SECONDS", "30")),
        HTTP_TIMEOUT_SECONDS=float(os.getenv("HTTP_TIMEOUT_SECONDS", "15")),
        MAX_CONTENT_LENGTH=int(os.getenv("MAX_CONTENT_LENGTH", str(20 * 1024 * 1024))),
        LOG_DIR=os.getenv("LOG_DIR", str(BASE_DIR / "logs")),
    )


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.update(_env_config())
    app.config.update(
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        SQLALCHEMY_ENGINE_OPTIONS=ENGINE_OPTIONS,
    )
    if test_config:
        app.config.update(test_config)

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise ConfigError("La variable de entorno DATABASE_URL no está definida.")

    _init_logging(app)
    _warn_missing(app)

    db.init_app(app)
    CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)

    import models_proveedores  # noqa: F401  (registra la tabla antes de create_all)
    from routes_proveedores import bp_proveedores
    app.register_blueprint(bp_proveedores)

    with app.app_context():
        db.create_all()

    # ---------- Health ----------
    @app.get("/health")
    @app.get("/healthz")
    def health():
        return jsonify(ok=True, service="portal-proveedores")

    return app


def _warn_missing(app):
    cfg = app.config
    if not cfg.get("RESEND_API_KEY") and not cfg.get("MAILER"):
        app.logger.warning("[NOTIFY] Resend no configurado; los correos fallarán (no bloquean el registro)")
    if not cfg.get("S3_BUCKET") and not cfg.get("MEDIA_STORE"):
        app.logger.warning("[UPLOAD] S3 no configurado; las subidas fallarán")
    if not cfg.get("JWT_SECRET"):
        app.logger.warning("[AUTH] JWT_SECRET no configurado; las rutas protegidas responderán 401")


def _init_logging(app):
    app.logger.setLevel(logging.INFO)
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    sh = logging.StreamHandler(); sh.setFormatter(fmt); app.logger.addHandler(sh)
    log_dir = app.config.get("LOG_DIR")
    if log_dir:
        try:
            Path(log_dir).mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(Path(log_dir) / "backend.log", maxBytes=5_000_000, backupCount=3, encoding="utf-8")
            fh.setFormatter(fmt); app.logger.addHandler(fh)
        except OSError as e:
            app.logger.warning("Log a fichero no disponible: %s", e)
    app.logger.info("Logging listo")


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "10000")), debug=False)
