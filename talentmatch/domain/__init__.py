"""Domain Layer: models, events, errors and interfaces shared by all layers."""
