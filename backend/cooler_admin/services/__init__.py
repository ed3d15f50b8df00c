"""Service Layer — operations that combine infrastructure calls with core logic."""
