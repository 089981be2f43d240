"""Database Schema — SQLAlchemy Base and reference seed data.

Invariants:
    - All models inherit from db/base.Base
    - Seed rows use stable string ids so migrations and tests agree on them

Design Decisions:
    - Engine and sessions live in infrastructure/database.py; this package holds
      only what migrations and models share
"""
