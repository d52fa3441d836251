"""
CockroachDB import review console.

Server-rendered UI for reviewing and editing the statements produced by the
PostgreSQL-to-CockroachDB migration backend.
"""
