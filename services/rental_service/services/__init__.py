"""Business logic for the rental service."""
