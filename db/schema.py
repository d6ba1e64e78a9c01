# SQL schema for the WeekWise key-value store

SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Every record (profiles, subjects, weeks, progress, local accounts)
-- lives here as a JSON document under a namespaced key.
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY NOT NULL,
    value TEXT NOT NULL
);
"""
