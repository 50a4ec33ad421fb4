"""Domain layer: rule entities and services."""
