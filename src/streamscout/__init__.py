"""streamscout - scraping stream provider for a single streaming site."""

from __future__ import annotations

from streamscout.interfaces import Provider, build_provider, load_provider

__version__ = "0.1.0"

__all__ = ["Provider", "build_provider", "load_provider"]
