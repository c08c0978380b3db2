from .canonical import FLOAT_TOLERANCE, CanonicalRenderer, format_number, render, render_node

__all__ = ["FLOAT_TOLERANCE", "CanonicalRenderer", "format_number", "render", "render_node"]
