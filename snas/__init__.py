"""
SNAS - ServiceNow Achievements Showcase

Prioritizes a professional's certifications, badges and service recognitions for a
target audience and generates shareable content (LinkedIn posts, badge descriptions,
professional summaries) from them.

Architecture:
- Intake Context: Achievement import, validation and cleanup
- Targeting Context: Audience-aware priority scoring and portfolio statistics
- Content Context: AI-backed content generation with deterministic template fallback
"""

__version__ = "0.1.0"
