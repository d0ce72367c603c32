from .dependencies import provide_service

__all__ = ["provide_service"]
