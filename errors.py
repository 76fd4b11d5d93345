# errors.py: taxonomía de errores del portal de proveedores
# Cada error sabe qué status HTTP le corresponde; las rutas sólo lo serializan.


class PortalError(Exception):
    status_code = 500
    message = "Ocurrió un error en el servidor."

    def __init__(self, message=None, detail=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.detail = detail

    def to_dict(self):
        body = {"message": self.message}
        if self.detail:
            body["error"] = self.detail
        return body


class MethodNotAllowed(PortalError):
    status_code = 405
    message = "Método no permitido. Use POST."


class MalformedRequest(PortalError):
    status_code = 400
    message = "La solicitud no es un formulario multipart válido."


class ValidationError(PortalError):
    """Falta un campo o documento obligatorio (sólo se reporta el primero)."""
    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class UploadError(PortalError):
    status_code = 500
    message = "Error al subir uno de los archivos."

    def __init__(self, label: str, cause=None):
        super().__init__(detail=label)
        self.label = label
        self.cause = cause


class PersistenceError(PortalError):
    status_code = 500
    message = "No se pudo guardar el registro del proveedor."


class NotificationError(PortalError):
    # interno: se registra en el log y nunca llega a la respuesta
    message = "No se pudo enviar la notificación por correo."


class AuthError(PortalError):
    status_code = 401
    message = "Token inválido o expirado."


class ConfigError(RuntimeError):
    pass
