"""
Shared utilities for SNAS.

Common functionality used across contexts:
- Configuration and logging
- Error kinds and structured error responses
- Caching, metrics and the achievement store
"""
