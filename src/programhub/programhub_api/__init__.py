"""ProgramHub API subpackage."""
