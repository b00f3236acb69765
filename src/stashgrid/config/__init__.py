"""Region layout configuration (YAML defaults plus user overrides)."""
from .layout import RegionLayout, build_layout, default_layout, load_layout

__all__ = ["RegionLayout", "build_layout", "default_layout", "load_layout"]
