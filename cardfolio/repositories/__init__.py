"""
Persistence adapters.

Services depend on SQLRepository instead of opening SQLAlchemy sessions themselves.
"""
