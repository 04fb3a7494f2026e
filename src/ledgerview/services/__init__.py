"""Service module exports."""

from . import drafts, filters, summary

__all__ = ["drafts", "filters", "summary"]
