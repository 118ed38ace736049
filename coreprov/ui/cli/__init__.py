"""CLI sub-command groups registered by ``coreprov.main``."""
