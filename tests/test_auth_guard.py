import jwt
import pytest

from auth_guard import make_token, verify_auth
from errors import AuthError


def _cookie(token):
    return f"theme=dark; authToken={token}"


def test_token_valido_devuelve_claims(app):
    token = make_token({"sub": "admin:1", "role": "admin"}, "test-secret")
    with app.app_context():
        claims = verify_auth(_cookie(token))
    assert claims["sub"] == "admin:1"
    assert claims["role"] == "admin"


def test_sin_cookie(app):
    with app.app_context():
        with pytest.raises(AuthError) as exc:
            verify_auth("theme=dark")
    assert exc.value.message == "Token de autenticación no encontrado."


def test_firma_incorrecta(app):
    token = make_token({"sub": "x"}, "otra-clave")
    with app.app_context():
        with pytest.raises(AuthError) as exc:
            verify_auth(_cookie(token))
    assert exc.value.message == "Token inválido o expirado."


def test_token_caducado(app):
    token = make_token({"sub": "x"}, "test-secret", ttl_min=-1)
    with app.app_context():
        with pytest.raises(AuthError):
            verify_auth(_cookie(token))


def test_sin_secreto_configurado(app):
    app.config["JWT_SECRET"] = None
    token = jwt.encode({"sub": "x"}, "test-secret", algorithm="HS256")
    with app.app_context():
        with pytest.raises(AuthError):
            verify_auth(_cookie(token))


def test_ruta_protegida(app, client, build_form):
    resp = client.post("/api/save-pnatural", data=build_form(), content_type="multipart/form-data")
    provider_id = resp.get_json()["providerId"]
    url = f"/api/proveedores/naturales/{provider_id}"

    assert client.get(url).status_code == 401
    assert client.get(url, headers={"Cookie": "authToken=basura"}).get_json() == {"message": "Token inválido o expirado."}

    token = make_token({"sub": "admin:1"}, "test-secret")
    resp = client.get(url, headers={"Cookie": _cookie(token)})
    assert resp.status_code == 200
    assert resp.get_json()["id"] == provider_id
    assert resp.get_json()["cedula"] == "123"

    resp = client.get("/api/proveedores/naturales/noexiste", headers={"Cookie": _cookie(token)})
    assert resp.status_code == 404
