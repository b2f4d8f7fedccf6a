"""Core primitives: exceptions and the clock."""
