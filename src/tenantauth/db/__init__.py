"""Persistence — ORM models, engine, and Alembic migrations."""
