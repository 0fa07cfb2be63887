"""Content model, mutation rules and publish workflow."""
