"""Pydantic Schemas — validation for review templates and API request/response bodies.

Invariants:
    - Schemas validate at system boundary (persisted templates, API payloads)
    - Domain types from core/ used for enum fields

Design Decisions:
    - Review template models live here, not in core/: parsing persisted JSON is a
      boundary concern, resolution over validated models stays pure
"""
