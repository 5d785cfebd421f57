from .state import current_session, require_page, get_store
from .manager_view import render_manager

__all__ = ["current_session", "require_page", "get_store", "render_manager"]
