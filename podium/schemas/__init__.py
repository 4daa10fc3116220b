"""
Podium Schemas - Pydantic models for presentation outlines.

This module exports:
- Section and GeneratedSection
- OutlineDraft and Outline
- OutlineStatus lifecycle labels
"""

from .outline import (
    DEFAULT_SECTION_DURATION,
    OutlineStatus,
    Section,
    GeneratedSection,
    OutlineDraft,
    Outline,
    compute_total_duration,
)

__all__ = [
    'DEFAULT_SECTION_DURATION',
    'OutlineStatus',
    'Section',
    'GeneratedSection',
    'OutlineDraft',
    'Outline',
    'compute_total_duration',
]
