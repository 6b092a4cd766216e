from .coordinator import BatchCoordinator
from .api import app, create_app

__all__ = ['BatchCoordinator', 'app', 'create_app']
