"""
Content Context

Responsibilities:
- Generates LinkedIn posts, badge descriptions and professional summaries
- Calls the AI backend when configured, with template fallback on any failure
- Caches generated suggestions per achievement, content type and audience

Owns: Content templates, category profiles and the AI client
Never: Changes achievement records or scores
"""
