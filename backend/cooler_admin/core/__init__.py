"""Core Layer — domain types, errors and pure data-shaping functions.

Invariants:
    - No IO: nothing in core/ touches the network or the database
"""
