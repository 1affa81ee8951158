"""Session state and handlers behind the InstantArt front end."""

from .models import SessionState
from .state import initialize_session

__all__ = ["SessionState", "initialize_session"]
