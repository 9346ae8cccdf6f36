"""
Services for turning stored content into pages.
"""
from .renderer import MarkdownRenderer, estimate_reading_time, strip_front_matter

__all__ = ['MarkdownRenderer', 'estimate_reading_time', 'strip_front_matter']
