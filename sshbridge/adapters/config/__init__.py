"""
Startup configuration
"""
from .loader import ConfigLoader, build_credentials

__all__ = ["ConfigLoader", "build_credentials"]
