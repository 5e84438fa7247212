from .base import CredentialsProvider, PlatformAdapter
from .registry import PlatformRegistry, build_default_registry

__all__ = [
    "CredentialsProvider",
    "PlatformAdapter",
    "PlatformRegistry",
    "build_default_registry",
]
