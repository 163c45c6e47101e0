"""Media verification worker for the Jevah gospel media platform."""

__version__ = "0.1.0"
