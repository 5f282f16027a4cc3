"""Backend services for the Statutax engine."""
