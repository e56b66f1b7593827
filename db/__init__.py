"""
db/ - Database Layer
====================
Handles the PostgreSQL container, connection pool, and versioned schema migrations.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
