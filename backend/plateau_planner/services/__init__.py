"""
Services Layer

Pure planning logic:
- Accept plain inputs (team labels, settings, seeds)
- Return plain outputs (dataclasses, dicts)
- Do NOT depend on HTTP request/response objects
- Do NOT touch the database
"""
