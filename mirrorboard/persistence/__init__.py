"""Layout persistence against the dashboard backend."""
