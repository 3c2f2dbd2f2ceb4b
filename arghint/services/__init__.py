"""Pure-Python argument hint services: scanning, resolving, masking, lifecycle."""
