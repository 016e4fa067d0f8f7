"""Domain layer: order aggregate, catalog read models, validation and payments."""
