# routes_proveedores.py: registro de proveedores (Persona Natural)
from flask import Blueprint, current_app, jsonify, request

import services_store
from auth_guard import require_auth
from errors import PortalError
from services_submission import SubmissionPipeline

bp_proveedores = Blueprint("proveedores", __name__)

MSG_OK = "Proveedor registrado exitosamente."
MSG_ERROR = "Ocurrió un error en el servidor."


@bp_proveedores.route("/api/save-pnatural", methods=["POST", "GET", "PUT", "PATCH", "DELETE"])
def save_pnatural():
    """
    form-data:
      nombreCompleto, cedula, email, telefono, entidadBancaria, numeroCuenta (obligatorios)
      pais (+ departamento/ciudad si Colombia, otroPais/otraCiudad si Otro)
      tipoDocumento, direccion, tipoCuenta, ... (opcionales)
      archivoCedula, archivoRut, certificacionBancaria (obligatorios)
      hojaVida, certificadosEstudio, certificadosLaborales (opcionales)
    """
    pipeline = SubmissionPipeline()
    try:
        provider_id = pipeline.run(request)
    except PortalError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.exception("Error en /api/save-pnatural: %s", e)
        return jsonify(message=MSG_ERROR, error=type(e).__name__), 500

    return jsonify(message=MSG_OK, providerId=provider_id), 200


@bp_proveedores.get("/api/proveedores/naturales/<provider_id>")
@require_auth
def get_pnatural(provider_id):
    doc = services_store.get(services_store.COLECCION_NATURALES, provider_id)
    if not doc:
        return jsonify(message="Proveedor no encontrado."), 404
    return jsonify(doc.to_dict())
