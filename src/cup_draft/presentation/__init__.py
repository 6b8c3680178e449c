"""
Presentation Layer

Report projection and chat message formatting.
"""

from .cup_presenter import CupPresenter
from .report import ReportBlock, ReportSection, render, render_text

__all__ = ["CupPresenter", "ReportBlock", "ReportSection", "render", "render_text"]
