from .provider import Provider

__all__ = ["Provider"]
