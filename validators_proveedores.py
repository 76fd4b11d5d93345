# validators_proveedores.py: validación del registro de Persona Natural
# Fail-fast: se devuelve la primera violación, nunca la lista completa.
from typing import NamedTuple, Optional, Tuple

REQUIRED_FIELDS = ("nombreCompleto", "cedula", "email", "telefono", "entidadBancaria", "numeroCuenta")

PAIS_DOMESTICO = "colombia"
PAIS_OTRO = "otro"
CAMPOS_DOMESTICO = ("departamento", "ciudad")
CAMPOS_OTRO = ("otroPais", "otraCiudad")


class FileSlot(NamedTuple):
    name: str
    label: str
    required: bool


FILE_SLOTS = (
    FileSlot("archivoCedula",         "Copia de Cedula",         True),
    FileSlot("archivoRut",            "RUT",                     True),
    FileSlot("certificacionBancaria", "Certificacion Bancaria",  True),
    FileSlot("hojaVida",              "Hoja de Vida",            False),
    FileSlot("certificadosEstudio",   "Certificados de Estudio", False),
    FileSlot("certificadosLaborales", "Certificados Laborales",  False),
)


class Invalid(NamedTuple):
    field: str
    reason: str


def _missing(fields: dict, name: str) -> bool:
    return not (fields.get(name) or "").strip()


def _campo_obligatorio(name: str) -> Invalid:
    return Invalid(name, f"El campo '{name}' es obligatorio.")


def campos_por_pais(pais: Optional[str]) -> Tuple[str, ...]:
    p = (pais or "").strip().lower()
    if p == PAIS_DOMESTICO:
        return CAMPOS_DOMESTICO
    if p == PAIS_OTRO:
        return CAMPOS_OTRO
    return ()


def validate_submission(fields: dict, files: dict, slots=FILE_SLOTS):
    """
    Devuelve (True, None) o (False, Invalid(campo, motivo)).
    Orden: campos fijos -> campos según país -> documentos.
    """
    for name in REQUIRED_FIELDS:
        if _missing(fields, name):
            return False, _campo_obligatorio(name)

    for name in campos_por_pais(fields.get("pais")):
        if _missing(fields, name):
            return False, _campo_obligatorio(name)

    for slot in slots:
        if slot.required and files.get(slot.name) is None:
            return False, Invalid(slot.name, f"El documento '{slot.label}' es obligatorio.")

    return True, None


def present_slots(files: dict, slots=FILE_SLOTS):
    """Slots declarados que vienen en la petición, en orden de declaración."""
    return [s for s in slots if files.get(s.name) is not None]
