"""
Targeting Context

Responsibilities:
- Scores achievements for a target audience (live, unclamped formula)
- Ranks achievements and attaches display hints
- Reports portfolio statistics and data quality

Owns: Scoring rules and audience definitions
Never: Persists records or renders content templates
"""
