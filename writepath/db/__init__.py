"""Database — SQLAlchemy declarative Base shared by all models."""
