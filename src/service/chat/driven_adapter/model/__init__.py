"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.chat.driven_adapter.model.message_model import MessageModel

__all__ = ['MessageModel']
