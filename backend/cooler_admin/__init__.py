"""Cooler Admin — backend for the Cooler API platform admin dashboard.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
