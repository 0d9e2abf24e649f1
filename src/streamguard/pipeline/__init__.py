"""Stream pipeline model."""
