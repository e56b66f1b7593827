"""
orm/ - SQLAlchemy Layer
=======================
Declarative models over the same city / metro_system / metro_line tables,
plus the engine and session factory used by the SQLAlchemy catalogue.
"""
