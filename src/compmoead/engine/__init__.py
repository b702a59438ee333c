"""Engine layer: algorithm loop, components and configuration."""
