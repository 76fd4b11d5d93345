# auth_guard.py: verificación de sesión (JWT en cookie) para rutas protegidas
from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import current_app, g, jsonify, request
from werkzeug.http import parse_cookie

from errors import AuthError

JWT_ALGORITHM = "HS256"
TOKEN_MISSING = "Token de autenticación no encontrado."
TOKEN_INVALID = "Token inválido o expirado."


def verify_auth(cookie_header: str, secret: str = None, cookie_name: str = None) -> dict:
    """
    Lee la cookie de sesión del header `Cookie`, verifica firma y caducidad
    y devuelve los claims. Lanza AuthError si falta o no es válido.
    """
    cfg = current_app.config
    secret = secret or cfg.get("JWT_SECRET")
    cookie_name = cookie_name or cfg.get("AUTH_COOKIE_NAME") or "authToken"

    token = parse_cookie(cookie_header or "").get(cookie_name)
    if not token:
        raise AuthError(TOKEN_MISSING)
    if not secret:
        current_app.logger.warning("[AUTH] JWT_SECRET no configurado")
        raise AuthError(TOKEN_INVALID)
    try:
        return jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError as e:
        current_app.logger.info("[AUTH] token rechazado: %s", e)
        raise AuthError(TOKEN_INVALID) from e


def make_token(claims: dict, secret: str, ttl_min: int = 720) -> str:
    now = datetime.now(timezone.utc)
    payload = dict(claims, iat=now, exp=now + timedelta(minutes=ttl_min))
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def require_auth(view):
    """Decorador: 401 JSON si la cookie no trae un token válido; si no, g.auth = claims."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            g.auth = verify_auth(request.headers.get("Cookie", ""))
        except AuthError as e:
            return jsonify(e.to_dict()), e.status_code
        return view(*args, **kwargs)
    return wrapper
