"""Infrastructure Layer — cross-cutting concerns (structured logging).

Invariants:
    - Infrastructure never imports from core/ domain logic

Design Decisions:
    - Kept separate from core/ so pure modules only ever touch logging.getLogger
"""
