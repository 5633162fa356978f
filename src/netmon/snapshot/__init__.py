"""Snapshot data model and pure transforms over it."""
