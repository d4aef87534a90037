"""Configuration: option models, settings discovery, logging setup."""
