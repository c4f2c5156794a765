"""Request correlation and structured logging."""
