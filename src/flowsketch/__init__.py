"""flowsketch - Flow description text to diagram graph pipeline."""

from typing import TYPE_CHECKING

__all__ = ["Settings", "build_diagram", "classify", "layout"]

if TYPE_CHECKING:
    from .config.settings import Settings
    from .flowchart.classifier import classify
    from .flowchart.layout import layout
    from .flowchart.pipeline import build_diagram


def __getattr__(name: str):
    if name == "Settings":
        from .config.settings import Settings

        return Settings
    if name == "build_diagram":
        from .flowchart.pipeline import build_diagram

        return build_diagram
    if name == "classify":
        from .flowchart.classifier import classify

        return classify
    if name == "layout":
        from .flowchart.layout import layout

        return layout
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
