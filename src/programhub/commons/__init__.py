"""Commons subpackage."""
