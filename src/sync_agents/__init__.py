"""Reconcile skill and agent definitions across tool ecosystems."""

__version__ = "0.1.0"
