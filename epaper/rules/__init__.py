"""Rules file (rules.yaml) schema and loader."""
