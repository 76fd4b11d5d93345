# services_notify.py: correos de registro (admin + proveedor) vía Resend
import requests
from flask import current_app
from markupsafe import escape

from errors import NotificationError
from extensions import get_client

RESEND_ENDPOINT = "https://api.resend.com/emails"


class ResendMailer:
    def __init__(self, api_key, endpoint=RESEND_ENDPOINT, timeout=15.0):
        self.api_key = (api_key or "").strip()
        self.endpoint = endpoint or RESEND_ENDPOINT
        self.timeout = timeout

    @classmethod
    def from_config(cls, cfg):
        return cls(
            api_key=cfg.get("RESEND_API_KEY"),
            endpoint=cfg.get("RESEND_ENDPOINT"),
            timeout=float(cfg.get("HTTP_TIMEOUT_SECONDS") or 15),
        )

    def send(self, from_addr: str, to: list, subject: str, html: str) -> str:
        """Devuelve el id del mensaje; lanza NotificationError si Resend lo rechaza."""
        if not self.api_key:
            raise NotificationError(detail="resend_not_configured")
        if not to or not all(to):
            raise NotificationError(detail="missing_recipient")
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        data = {"from": from_addr, "to": list(to), "subject": subject, "html": html}
        try:
            r = requests.post(self.endpoint, headers=headers, json=data, timeout=self.timeout)
            r.raise_for_status()
            return (r.json() or {}).get("id", "")
        except (requests.RequestException, ValueError) as e:
            raise NotificationError(detail=str(e)) from e


def mailer():
    injected = current_app.config.get("MAILER")
    if injected is not None:
        return injected
    cfg = current_app.config
    return get_client("resend", lambda: ResendMailer.from_config(cfg))


# ---------- Plantillas ----------
def admin_email_html(p: dict, provider_id: str) -> str:
    return f"""
<h1>Nuevo Registro en el Portal de Proveedores</h1>
<p>Se ha registrado un nuevo proveedor ({escape(p.get("tipo", ""))}):</p>
<ul>
  <li><strong>Nombre:</strong> {escape(p.get("nombreCompleto", ""))}</li>
  <li><strong>Cédula:</strong> {escape(p.get("cedula", ""))}</li>
  <li><strong>Email:</strong> {escape(p.get("email", ""))}</li>
  <li><strong>Teléfono:</strong> {escape(p.get("telefono", ""))}</li>
</ul>
<p>Los documentos adjuntos han sido cargados y están listos para revisión en el portal de administración.</p>
<p>ID del registro: {escape(provider_id)}</p>
"""


def proveedor_email_html(p: dict, admin_email: str, phone: str) -> str:
    return f"""
<h1>Hemos recibido su información</h1>
<p>Hola {escape(p.get("nombreCompleto", ""))},</p>
<p>Confirmamos que hemos recibido sus documentos a satisfacción y nuestro equipo procederá a revisarlos para continuar con el proceso de vinculación.</p>
<p>El proceso de revisión puede tardar algunos días hábiles.</p>
<p>Cualquier inquietud, puede comunicarse con nosotros al correo <strong>{escape(admin_email)}</strong> o al número <strong>{escape(phone)}</strong>.</p>
<br>
<p>Atentamente,</p>
<p><strong>Equipo de la Fundación IDI</strong></p>
"""


def _try_send(m, channel, from_addr, to, subject, html) -> bool:
    try:
        msg_id = m.send(from_addr, to, subject, html)
        current_app.logger.info("[NOTIFY] %s enviado to=%s id=%s", channel, to, msg_id)
        return True
    except Exception as e:
        current_app.logger.warning("[NOTIFY] %s fallo to=%s: %s", channel, to, e)
        return False


def notify_registration(provider: dict, provider_id: str, m=None) -> dict:
    """
    Envía los dos correos de forma independiente. Un fallo se registra en el
    log y no afecta al otro envío ni al registro ya guardado.
    -> {"admin": bool, "proveedor": bool}
    """
    m = m or mailer()
    cfg = current_app.config
    admin_email = cfg.get("ADMIN_EMAIL")

    ok_admin = _try_send(
        m, "admin_email", cfg.get("MAIL_FROM_ADMIN"), [admin_email],
        f"Nuevo Proveedor Registrado: {provider.get('nombreCompleto', '')}",
        admin_email_html(provider, provider_id),
    )
    ok_prov = _try_send(
        m, "email", cfg.get("MAIL_FROM_PROVEEDOR"), [provider.get("email")],
        "Confirmación de Recepción de Documentos - Fundación IDI",
        proveedor_email_html(provider, admin_email, cfg.get("CONTACT_PHONE") or ""),
    )
    return {"admin": ok_admin, "proveedor": ok_prov}
