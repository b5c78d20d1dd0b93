"""Query-translation and pagination engine ("advanced results")."""
