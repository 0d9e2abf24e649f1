"""Pipeline anti-pattern rules."""
