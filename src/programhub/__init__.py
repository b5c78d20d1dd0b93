"""ProgramHub package: a REST directory of training programs, courses and reviews."""

__version__ = "0.1.0"
