"""HTTP API over the editor session."""
