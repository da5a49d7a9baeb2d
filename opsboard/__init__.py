"""Opsboard - machine capability rule engine for print/mail production."""

__version__ = "0.3.0"
