"""Per-technique strategies for the phased execution engine."""
