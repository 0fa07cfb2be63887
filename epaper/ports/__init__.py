"""Protocols for the collaborators the services depend on."""
