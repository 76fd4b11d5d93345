# services_store.py: almacén de documentos (append-only) sobre SQLAlchemy
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from errors import PersistenceError
from extensions import db
from models_proveedores import RegistroDocumento

COLECCION_NATURALES = "proveedores_naturales"


def append(collection: str, record: dict) -> str:
    """Inserta un documento nuevo en `collection` y devuelve su id."""
    doc = RegistroDocumento(collection=collection, data=record)
    try:
        db.session.add(doc)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("[STORE] no se pudo guardar en %s: %s", collection, e)
        raise PersistenceError(detail=type(e).__name__) from e
    current_app.logger.info("[STORE] %s/%s creado", collection, doc.id)
    return doc.id


def get(collection: str, doc_id: str):
    doc = db.session.get(RegistroDocumento, doc_id)
    if doc is None or doc.collection != collection:
        return None
    return doc

