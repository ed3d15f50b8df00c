"""ORM Models — minimal mappings of the upstream tables the maintenance routes clear.

Invariants:
    - One module per table family
    - Columns limited to what deletes, counts and test fixtures need
"""
