"""PostgreSQL connection, pool and table setup helpers for the session store."""
