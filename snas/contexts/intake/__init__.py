"""
Intake Context

Responsibilities:
- Reads achievement records from CSV text, CSV files, YAML and inline lists
- Validates and normalizes records, skipping duplicates on (name, issuer)
- Stores records with their import-time priority score

Owns: Achievement record model, import validation and cleanup
Never: Ranks achievements for an audience or writes content
"""
