"""
Transform collaborators producing executable SSR code.
"""

from .source_transformer import SourceTransformer

__all__ = ["SourceTransformer"]
