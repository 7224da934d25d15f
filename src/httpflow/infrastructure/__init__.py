"""Infrastructure - logging and HTTP transport."""
