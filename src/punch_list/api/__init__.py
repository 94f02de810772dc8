"""HTTP API over the task store."""
