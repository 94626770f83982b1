"""Shared domain building blocks (errors, time helpers)."""
