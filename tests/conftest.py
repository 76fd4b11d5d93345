import io

import pytest

from app import create_app
from errors import NotificationError, UploadError
from extensions import reset_clients


class FakeMediaStore:
    """Guarda en memoria; `fail_on` son etiquetas de slot cuya subida falla."""

    def __init__(self):
        self.objects = {}
        self.deleted = []
        self.fail_on = set()

    def upload(self, fileobj, key, content_type):
        if any(key.endswith("/" + label.replace(" ", "_")) for label in self.fail_on):
            raise UploadError(key, cause="boom")
        self.objects[key] = (fileobj.read(), content_type)
        return f"https://media.test/{key}"

    def exists(self, key):
        return key in self.objects

    def delete(self, key):
        self.deleted.append(key)
        self.objects.pop(key, None)


class FakeMailer:
    def __init__(self):
        self.sent = []
        self.reject = set()   # destinatarios que el proveedor rechaza

    def send(self, from_addr, to, subject, html):
        if any(t in self.reject for t in to):
            raise NotificationError(detail="rejected")
        self.sent.append({"from": from_addr, "to": list(to), "subject": subject, "html": html})
        return f"msg_{len(self.sent)}"


VALID_FIELDS = {
    "nombreCompleto": "Ana Ruiz",
    "cedula": "123",
    "email": "a@x.com",
    "telefono": "555",
    "entidadBancaria": "Banco X",
    "numeroCuenta": "001",
}

REQUIRED_FILES = {
    "archivoCedula": "cedula.pdf",
    "archivoRut": "rut.pdf",
    "certificacionBancaria": "banco.pdf",
}


@pytest.fixture
def media():
    return FakeMediaStore()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def app(media, mailer):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "SQLALCHEMY_ENGINE_OPTIONS": {},
        "MEDIA_STORE": media,
        "MAILER": mailer,
        "JWT_SECRET": "test-secret",
        "LOG_DIR": "",
    })
    yield app
    reset_clients()


@pytest.fixture
def client(app):
    return app.test_client(use_cookies=False)


@pytest.fixture
def build_form():
    """Construye el `data` multipart; los ficheros se crean nuevos en cada llamada."""
    def _build(fields=None, files=None, omit=()):
        data = dict(VALID_FIELDS if fields is None else fields)
        names = dict(REQUIRED_FILES if files is None else files)
        for slot, filename in names.items():
            data[slot] = (io.BytesIO(f"contenido {slot}".encode()), filename)
        for key in omit:
            data.pop(key, None)
        return data
    return _build
