"""Edit session and interaction services."""
