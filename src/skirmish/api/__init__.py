"""Read-only HTTP surface over the combat rules."""
