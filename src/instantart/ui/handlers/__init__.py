"""Event handlers for the InstantArt session.

Organised by concern:
- generation: the submission boundary (generate and edit)
- gallery: selection, clearing and export
- prompt: mode, configuration and source-image changes
"""

from .gallery import clear_history, export_filename, export_image, select_image
from .generation import submit_prompt
from .prompt import clear_source_image, preview_prompt, set_mode, set_source_image, update_config

__all__ = [
    "clear_history",
    "clear_source_image",
    "export_filename",
    "export_image",
    "preview_prompt",
    "select_image",
    "set_mode",
    "set_source_image",
    "submit_prompt",
    "update_config",
]
