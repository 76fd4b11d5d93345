# forms_ingest.py: lectura del formulario multipart de registro
# Devuelve (campos, ficheros); si un campo llega repetido gana la PRIMERA
# aparición (la multiplicidad no significa nada en este formulario).
from werkzeug.exceptions import RequestEntityTooLarge

from errors import MalformedRequest


def parse_multipart(req):
    """
    req: flask.Request
    -> fields: {nombre: valor (str, sin espacios a los lados)}
    -> files:  {slot: FileStorage}  (sólo partes con filename no vacío)
    """
    if (req.mimetype or "").lower() != "multipart/form-data":
        raise MalformedRequest()
    if not req.mimetype_params.get("boundary"):
        raise MalformedRequest(detail="missing_boundary")

    try:
        form, uploaded = req.form, req.files
    except RequestEntityTooLarge:
        raise MalformedRequest("El formulario excede el tamaño máximo permitido.")
    if not form and not uploaded:
        raise MalformedRequest(detail="empty_multipart")

    fields = {}
    for key in form.keys():
        values = form.getlist(key)
        fields[key] = (values[0] if values else "").strip()

    files = {}
    for key in uploaded.keys():
        fs = next((f for f in uploaded.getlist(key) if f and f.filename), None)
        if fs is not None:
            files[key] = fs
    return fields, files
