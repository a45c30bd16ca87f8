"""
Errores de dominio del petstore.

Los servicios y el control de acceso lanzan estas excepciones; la aplicación
FastAPI las traduce a respuestas HTTP en un único handler (ver main.py).
"""
from typing import Dict, Optional


class PetstoreError(Exception):
    status_code: int = 500

    def __init__(self, detail: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail)
        self.detail = detail
        self.headers = headers


class NotFound(PetstoreError):
    """El objetivo de la operación no existe"""
    status_code = 404


class AlreadyExists(PetstoreError):
    """Colisión de regla de negocio al crear"""
    status_code = 409


class InvalidRequest(PetstoreError):
    """Entrada mal formada (p. ej. conjunto de tags vacío)"""
    status_code = 400


class Unauthorized(PetstoreError):
    """Sin credencial o credencial inválida"""
    status_code = 401

    def __init__(self, detail: str = "Token inválido"):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(PetstoreError):
    """Credencial válida pero rol insuficiente"""
    status_code = 403

    def __init__(self, detail: str = "Permisos insuficientes"):
        super().__init__(detail)
