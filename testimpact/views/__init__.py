"""Renderings of impact results."""

from .report import FORMATS, render, render_closure

__all__ = ["FORMATS", "render", "render_closure"]
