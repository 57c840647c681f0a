"""Ticket routing and assignment for the multi-tenant support desk."""

__version__ = "0.1.0"
