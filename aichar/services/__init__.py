"""Service layer for aichar."""
