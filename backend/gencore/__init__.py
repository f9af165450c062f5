"""GenCore Application Package — generation form graphs, review templates, entry scoring.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
