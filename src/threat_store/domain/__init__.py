"""Domain layer - model names, revisions, errors and pure services."""
