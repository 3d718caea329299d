"""ORM models backing the SQL blob store."""
