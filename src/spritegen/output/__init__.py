"""Output formatting: Rich renderers for humans, JSON for machines."""
