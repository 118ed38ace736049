"""User interfaces for the provisioning engine."""
