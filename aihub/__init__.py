"""AI Hub server: multi-tenant assistants with organization role-based access."""

__version__ = "0.1.0"
