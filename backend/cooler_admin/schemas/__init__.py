"""API Schemas — Pydantic models for request validation and response shaping.

Invariants:
    - Wire format is camelCase (matches the upstream Cooler API); Python attributes are snake_case
"""
