"""
Prompt templates for the creative review analysis.
"""

from .combined_analysis import (
    COMBINED_ANALYSIS_SYSTEM_PROMPT,
    COMBINED_ANALYSIS_USER_TEMPLATE,
    render_user_prompt,
)

__all__ = [
    "COMBINED_ANALYSIS_SYSTEM_PROMPT",
    "COMBINED_ANALYSIS_USER_TEMPLATE",
    "render_user_prompt",
]
