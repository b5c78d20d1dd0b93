"""DAO subpackage."""
