"""Views subsystem: View protocol, ViewManager, and the menu and game screens."""

from noteinvaders.views.base import View, ViewAction, ViewContext, ViewManager

__all__ = ["View", "ViewAction", "ViewContext", "ViewManager"]
