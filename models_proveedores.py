# models_proveedores.py: documentos de registro de proveedores
# Almacén tipo "colección + documento JSON": cada fila es un documento
# inmutable dentro de una colección (proveedores_naturales, ...).
import uuid
from datetime import datetime
from extensions import db


def _new_id() -> str:
    return uuid.uuid4().hex


class RegistroDocumento(db.Model):
    __tablename__ = "registros"
    id          = db.Column(db.String(32), primary_key=True, default=_new_id)
    collection  = db.Column(db.String(64), nullable=False, index=True)
    created_at  = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    data        = db.Column(db.JSON, nullable=False)

    def to_dict(self):
        doc = dict(self.data or {})
        doc["id"] = self.id
        return doc
