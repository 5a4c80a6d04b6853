"""Email Writer: rough notes in, finished email out."""

__version__ = "1.0.0"
