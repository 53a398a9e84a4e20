"""
Controllers module exports
"""
from gitrail.controllers.app_controller import AppController
from gitrail.controllers.key_handler import KeyHandler

__all__ = [
    'AppController',
    'KeyHandler'
]
