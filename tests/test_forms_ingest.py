import io

import pytest

from errors import MalformedRequest
from forms_ingest import parse_multipart
from flask import request


def test_campos_y_ficheros(app):
    data = {
        "nombreCompleto": "  Ana Ruiz ",
        "archivoRut": (io.BytesIO(b"%PDF"), "rut.pdf"),
    }
    with app.test_request_context("/", method="POST", data=data, content_type="multipart/form-data"):
        fields, files = parse_multipart(request)

    assert fields == {"nombreCompleto": "Ana Ruiz"}
    assert list(files) == ["archivoRut"]
    assert files["archivoRut"].filename == "rut.pdf"


def test_repetidos_gana_el_primero(app):
    data = {
        "cedula": ["111", "222"],
        "archivoRut": [(io.BytesIO(b"a"), "a.pdf"), (io.BytesIO(b"b"), "b.pdf")],
    }
    with app.test_request_context("/", method="POST", data=data, content_type="multipart/form-data"):
        fields, files = parse_multipart(request)
        assert files["archivoRut"].read() == b"a"

    assert fields["cedula"] == "111"
    assert files["archivoRut"].filename == "a.pdf"


def test_json_no_es_multipart(app):
    with app.test_request_context("/", method="POST", json={"a": 1}):
        with pytest.raises(MalformedRequest):
            parse_multipart(request)


def test_multipart_sin_boundary(app):
    with app.test_request_context("/", method="POST", data="xx", content_type="multipart/form-data"):
        with pytest.raises(MalformedRequest) as exc:
            parse_multipart(request)
    assert exc.value.status_code == 400


def test_formulario_demasiado_grande(app):
    app.config["MAX_CONTENT_LENGTH"] = 10
    data = {"archivoRut": (io.BytesIO(b"x" * 100), "rut.pdf")}
    with app.test_request_context("/", method="POST", data=data, content_type="multipart/form-data"):
        with pytest.raises(MalformedRequest) as exc:
            parse_multipart(request)
    assert "tamaño" in exc.value.message


def test_multipart_vacio_es_malformado(app):
    with app.test_request_context("/", method="POST", data=b"basura",
                                  content_type="multipart/form-data; boundary=xyz"):
        with pytest.raises(MalformedRequest) as exc:
            parse_multipart(request)
    assert exc.value.detail == "empty_multipart"
