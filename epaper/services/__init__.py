"""Application services built on the domain functions."""
