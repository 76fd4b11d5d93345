# services_media.py: subida de documentos adjuntos a S3
# Clave determinista por slot: {prefijo}/{categoria}/{cedula}/{Etiqueta_del_slot}
import mimetypes
import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app
from werkzeug.utils import secure_filename

from errors import UploadError
from extensions import get_client
from schemas import ArchivoAdjunto
from validators_proveedores import FILE_SLOTS, present_slots

DEFAULT_PREFIX = "portal_idi"
CATEGORIA_NATURAL = "natural"


class S3MediaStore:
    def __init__(self, bucket, region="us-east-1", public_base_url=None, endpoint_url=None,
                 timeout=30.0, client=None):
        self.bucket = (bucket or "").strip()
        self.region = region or "us-east-1"
        self.public_base_url = (public_base_url or "").rstrip("/")
        self._s3 = client or boto3.client(
            "s3",
            region_name=self.region,
            endpoint_url=endpoint_url or None,
            config=Config(connect_timeout=timeout, read_timeout=timeout, retries={"max_attempts": 2}),
        )

    @classmethod
    def from_config(cls, cfg):
        return cls(
            bucket=cfg.get("S3_BUCKET"),
            region=cfg.get("AWS_REGION"),
            public_base_url=cfg.get("S3_PUBLIC_BASE_URL"),
            endpoint_url=cfg.get("S3_ENDPOINT_URL"),
            timeout=float(cfg.get("UPLOAD_TIMEOUT_SECONDS") or 30),
        )

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload(self, fileobj, key: str, content_type: str) -> str:
        if not self.bucket:
            raise UploadError(key, cause="s3_not_configured")
        try:
            self._s3.upload_fileobj(
                Fileobj=fileobj,
                Bucket=self.bucket,
                Key=key,
                ExtraArgs={"ContentType": content_type},
            )
        except (ClientError, BotoCoreError) as e:
            raise UploadError(key, cause=e) from e
        return self.public_url(key)

    def exists(self, key: str) -> bool:
        if not self.bucket:
            raise UploadError(key, cause="s3_not_configured")
        try:
            self._s3.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise UploadError(key, cause=e) from e
        except BotoCoreError as e:
            raise UploadError(key, cause=e) from e
        return True

    def delete(self, key: str) -> None:
        self._s3.delete_object(Bucket=self.bucket, Key=key)


def media_store():
    """Store inyectado en config (tests) o el cliente S3 único del proceso."""
    injected = current_app.config.get("MEDIA_STORE")
    if injected is not None:
        return injected
    cfg = current_app.config
    return get_client("s3", lambda: S3MediaStore.from_config(cfg))


def object_key(prefix: str, category: str, cedula: str, label: str) -> str:
    partition = secure_filename(cedula or "") or "sin_cedula"
    name = label.strip().replace(" ", "_")
    return f"{(prefix or DEFAULT_PREFIX).strip('/')}/{category}/{partition}/{name}"


def detect_content_type(fs) -> str:
    guessed, _ = mimetypes.guess_type(fs.filename or "")
    return guessed or fs.mimetype or "application/octet-stream"


def compensate(store, keys) -> None:
    """Borra (best-effort) las claves creadas por este envío. Nunca lanza."""
    for key in keys:
        try:
            store.delete(key)
            current_app.logger.info("[UPLOAD] compensado key=%s", key)
        except Exception as e:
            current_app.logger.warning("[UPLOAD] no se pudo borrar key=%s: %s", key, e)


def upload_attachments(files: dict, cedula: str, store=None, prefix=None,
                       category=CATEGORIA_NATURAL, slots=FILE_SLOTS):
    """
    Sube cada slot presente, en orden de declaración.
    Si uno falla: se borran sólo las claves que este envío creó (las que ya
    existían pertenecen a un registro anterior) y se lanza UploadError(etiqueta).
    """
    store = store or media_store()
    prefix = prefix or current_app.config.get("S3_PREFIX") or DEFAULT_PREFIX
    creados, adjuntos = [], []

    for slot in present_slots(files, slots):
        fs = files[slot.name]
        key = object_key(prefix, category, cedula, slot.label)
        ctype = detect_content_type(fs)
        try:
            existia = store.exists(key)
            url = store.upload(fs.stream, key, ctype)
            if not url:
                raise UploadError(slot.label, cause="empty_url")
        except Exception as e:
            current_app.logger.warning("[UPLOAD] fallo slot=%s key=%s: %s", slot.name, key, e)
            compensate(store, creados)
            raise UploadError(slot.label, cause=e) from e

        if not existia:
            creados.append(key)
        adjuntos.append(ArchivoAdjunto(
            documento=slot.label, campo=slot.name, nombre=fs.filename, url=url, tipo=ctype,
        ))
        current_app.logger.info("[UPLOAD] ok slot=%s key=%s", slot.name, key)

    return adjuntos
