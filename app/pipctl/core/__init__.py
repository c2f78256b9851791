"""Core reconciliation logic, configuration and state for pipctl."""
