"""PostgreSQL persistence hand-off (psycopg2)."""
