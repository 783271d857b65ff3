"""Infrastructure Layer — stores, locks, outbound HTTP clients and logging."""
