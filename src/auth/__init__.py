from .session import Session
from .navigation import Page, visible_pages, default_page, can_access

__all__ = ["Session", "Page", "visible_pages", "default_page", "can_access"]
