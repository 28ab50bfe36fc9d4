"""
High-level use cases for the medinfo catalog.

Each service module orchestrates the record store to implement business rules
(validate an entry, log an administrator in, etc.).

Routers (FastAPI endpoints) call these services instead of manipulating the
JSON document or sessions directly.
"""
