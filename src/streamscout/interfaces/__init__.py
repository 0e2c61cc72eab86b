from .composition import build_provider, load_provider
from .provider import Provider

__all__ = ["Provider", "build_provider", "load_provider"]
