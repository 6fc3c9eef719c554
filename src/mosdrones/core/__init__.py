"""Core types, errors and the order state machine."""
