"""
Podium - Author presentation outlines and deliver them section by section.

Subpackages:
- schemas: Section and Outline models
- session: store, navigator, completion synchronizer, progress
- utils: prompt template loading
"""

__version__ = "0.1.0"
