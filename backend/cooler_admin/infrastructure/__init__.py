"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports route modules
    - All external failures mapped to core/errors.py types
"""
