"""
Services module: command dispatch and server orchestration
"""

from .dispatcher import CommandDispatcher, SessionContext, SessionStore

__all__ = ['CommandDispatcher', 'SessionContext', 'SessionStore']
