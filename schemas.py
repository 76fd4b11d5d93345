from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

TIPO_PERSONA_NATURAL = "Persona Natural"
ESTADO_INICIAL = "Recibido"
SERVER_FIELDS = ("tipo", "fechaRegistro", "estado", "archivosAdjuntos")


def ahora_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ArchivoAdjunto(BaseModel):
    documento: str                 # etiqueta del slot, p.ej. "RUT"
    campo: str                     # nombre del slot en el formulario
    nombre: str                    # nombre original del fichero
    url: Optional[str] = None      # sólo si la subida tuvo éxito
    tipo: Optional[str] = None


class RegistroProveedor(BaseModel):
    # Los campos del formulario llegan tal cual (extra="allow");
    # tipo / fechaRegistro / estado los fija siempre el servidor.
    model_config = ConfigDict(extra="allow")

    tipo: str = TIPO_PERSONA_NATURAL
    fechaRegistro: str = Field(default_factory=ahora_iso)
    estado: str = ESTADO_INICIAL

    nombreCompleto: str
    cedula: str
    email: str
    telefono: str
    entidadBancaria: str
    numeroCuenta: str
    tipoDocumento: Optional[str] = None
    direccion: Optional[str] = None
    pais: Optional[str] = None
    departamento: Optional[str] = None
    ciudad: Optional[str] = None
    otroPais: Optional[str] = None
    otraCiudad: Optional[str] = None
    tipoCuenta: Optional[str] = None

    archivosAdjuntos: List[ArchivoAdjunto] = Field(default_factory=list)

    @classmethod
    def from_form(cls, fields: dict, fecha_registro: Optional[str] = None, tipo: str = TIPO_PERSONA_NATURAL):
        data = {k: v for k, v in fields.items() if k not in SERVER_FIELDS}
        return cls(tipo=tipo, fechaRegistro=fecha_registro or ahora_iso(), **data)

    def to_document(self) -> dict:
        return self.model_dump(exclude_none=True)
