# services_submission.py: orquestación de un envío de registro
# Received → Parsed → Validated → Uploaded → Persisted → Notified → Completed
# Cualquier paso puede terminar en Failed; nada se escribe antes de Validated
# y el registro sólo se guarda cuando todas las subidas han terminado bien.
from enum import Enum

from flask import current_app

import services_store
from errors import MethodNotAllowed, ValidationError
from forms_ingest import parse_multipart
from schemas import RegistroProveedor, TIPO_PERSONA_NATURAL, ahora_iso
from services_media import CATEGORIA_NATURAL, upload_attachments
from services_notify import notify_registration
from validators_proveedores import FILE_SLOTS, validate_submission


class EstadoEnvio(str, Enum):
    RECEIVED  = "Received"
    PARSED    = "Parsed"
    VALIDATED = "Validated"
    UPLOADED  = "Uploaded"
    PERSISTED = "Persisted"
    NOTIFIED  = "Notified"
    COMPLETED = "Completed"
    FAILED    = "Failed"


class SubmissionPipeline:
    def __init__(self, collection=services_store.COLECCION_NATURALES, tipo=TIPO_PERSONA_NATURAL,
                 category=CATEGORIA_NATURAL, slots=FILE_SLOTS, media=None, mailer=None):
        self.collection = collection
        self.tipo = tipo
        self.category = category
        self.slots = slots
        self.media = media
        self.mailer = mailer

        self.state = EstadoEnvio.RECEIVED
        self.fecha_registro = ahora_iso()
        self.cedula = None
        self.provider_id = None
        self.notificaciones = {}
        self.error = None

    def _to(self, state):
        current_app.logger.info("[PNATURAL] %s -> %s cedula=%s", self.state.value, state.value, self.cedula or "-")
        self.state = state

    def run(self, req) -> str:
        """Procesa la petición completa y devuelve el id del registro creado."""
        try:
            if req.method != "POST":
                raise MethodNotAllowed()

            fields, files = parse_multipart(req)
            self._to(EstadoEnvio.PARSED)

            ok, invalid = validate_submission(fields, files, self.slots)
            if not ok:
                raise ValidationError(invalid.field, invalid.reason)
            self.cedula = fields["cedula"]
            self._to(EstadoEnvio.VALIDATED)

            record = RegistroProveedor.from_form(fields, fecha_registro=self.fecha_registro, tipo=self.tipo)
            record.archivosAdjuntos = upload_attachments(
                files, record.cedula, store=self.media, category=self.category, slots=self.slots,
            )
            self._to(EstadoEnvio.UPLOADED)

            doc = record.to_document()
            self.provider_id = services_store.append(self.collection, doc)
            self._to(EstadoEnvio.PERSISTED)

            self.notificaciones = notify_registration(doc, self.provider_id, m=self.mailer)
            self._to(EstadoEnvio.NOTIFIED)

            self._to(EstadoEnvio.COMPLETED)
            return self.provider_id
        except Exception as e:
            self.error = e
            self._to(EstadoEnvio.FAILED)
            raise
