"""pipctl - reconcile installed Python packages with their latest releases."""

__version__ = "0.1.0"
