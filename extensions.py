# extensions.py: punto único de extensiones compartidas
# Una sola instancia de SQLAlchemy y un registro de clientes externos
# (S3, correo) que se inicializan una vez por proceso.
import threading
from flask_sqlalchemy import SQLAlchemy

# Instancia global que importan modelos y app
db = SQLAlchemy()

_clients = {}
_clients_lock = threading.Lock()


def get_client(name: str, factory):
    """
    Devuelve el cliente `name`, creándolo con `factory()` la primera vez.
    Doble comprobación bajo lock: dos arranques en frío concurrentes
    nunca crean dos clientes.
    """
    client = _clients.get(name)
    if client is not None:
        return client
    with _clients_lock:
        client = _clients.get(name)
        if client is None:
            client = factory()
            _clients[name] = client
    return client


def reset_clients():
    with _clients_lock:
        _clients.clear()


__all__ = ["db", "get_client", "reset_clients"]
