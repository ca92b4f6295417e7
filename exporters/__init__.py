"""Exporters for rendering the build order in various output formats."""

from .order_exporter import to_build_order
from .make_exporter import to_make_deps
from .json_exporter import to_json
from .mermaid_exporter import to_mermaid

__all__ = ["to_build_order", "to_make_deps", "to_json", "to_mermaid"]
