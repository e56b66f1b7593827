"""
repositories/ - Data Access Layer (psycopg2)
=============================================
Each repository encapsulates the hand-written SQL for one part of the schema.
Repositories receive raw rows from psycopg2 and return domain model objects.
"""
