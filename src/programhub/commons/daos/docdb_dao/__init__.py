"""Document database DAO subpackage."""
