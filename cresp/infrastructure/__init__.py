"""Infrastructure Layer — database engine, security primitives, storage, email, logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Provider failures surface as CrespError subclasses (StorageError, EmailDeliveryError)

Design Decisions:
    - Backends chosen from settings at startup and exposed as FastAPI dependencies,
      so tests swap them with dependency_overrides
"""
