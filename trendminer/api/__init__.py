"""HTTP boundary of the trend mining service."""
