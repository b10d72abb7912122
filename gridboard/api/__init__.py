# Gridboard API

from .main import create_app
from .config import get_settings, Settings
from .routes import api_router

__all__ = [
    'create_app',
    'get_settings',
    'Settings',
    'api_router',
]
