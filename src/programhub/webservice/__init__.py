"""ProgramHub webservice."""
