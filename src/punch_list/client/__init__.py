"""HTTP client holding the pending/completed views."""
