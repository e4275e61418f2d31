"""Configuration: settings, models, personality and prompts."""
