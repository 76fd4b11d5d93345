import pytest
from flask import request

from errors import MethodNotAllowed, ValidationError
from services_submission import EstadoEnvio, SubmissionPipeline


def test_pipeline_completo(app, build_form, media, mailer):
    with app.test_request_context("/", method="POST", data=build_form(), content_type="multipart/form-data"):
        pipeline = SubmissionPipeline()
        provider_id = pipeline.run(request)

    assert provider_id == pipeline.provider_id
    assert pipeline.state is EstadoEnvio.COMPLETED
    assert pipeline.notificaciones == {"admin": True, "proveedor": True}


def test_pipeline_falla_en_validacion_sin_subidas(app, build_form, media):
    with app.test_request_context("/", method="POST", data=build_form(omit=("cedula",)),
                                  content_type="multipart/form-data"):
        pipeline = SubmissionPipeline()
        with pytest.raises(ValidationError) as exc:
            pipeline.run(request)

    assert exc.value.field == "cedula"
    assert pipeline.state is EstadoEnvio.FAILED
    assert pipeline.provider_id is None
    assert media.objects == {}


def test_pipeline_rechaza_metodo_antes_de_leer(app):
    with app.test_request_context("/", method="PUT"):
        pipeline = SubmissionPipeline()
        with pytest.raises(MethodNotAllowed):
            pipeline.run(request)
    assert pipeline.state is EstadoEnvio.FAILED


def test_fallo_de_correo_deja_el_pipeline_completado(app, build_form, mailer):
    mailer.reject = {"a@x.com"}
    with app.test_request_context("/", method="POST", data=build_form(), content_type="multipart/form-data"):
        pipeline = SubmissionPipeline()
        pipeline.run(request)

    assert pipeline.state is EstadoEnvio.COMPLETED
    assert pipeline.notificaciones == {"admin": True, "proveedor": False}
