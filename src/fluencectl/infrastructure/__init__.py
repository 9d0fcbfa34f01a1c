"""Infrastructure layer: YAML codec, templates, config loading and paths."""
