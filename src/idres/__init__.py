"""
idres - Identity resolution and confidence scoring for grant administration

Decides whether noisy, multi-source person and institution strings refer to
the same real-world entity, with a graded confidence score. Used by the
integrity screener, reviewer sourcing and funding-gap analysis.
"""

__version__ = "0.1.0"
