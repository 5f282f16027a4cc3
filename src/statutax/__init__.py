"""Tax and statutory computation engine."""
