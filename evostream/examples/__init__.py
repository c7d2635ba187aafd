"""Runnable example problems."""
