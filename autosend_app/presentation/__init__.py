"""
Presentation hooks for countdowns and scheduler updates.
"""

from .presenter import ConsolePresenter, CountdownPresenter, render_status

__all__ = ["ConsolePresenter", "CountdownPresenter", "render_status"]
