"""Actions that act on processes found in a snapshot."""
