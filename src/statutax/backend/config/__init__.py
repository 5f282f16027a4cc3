"""Rule table configuration and validation."""
