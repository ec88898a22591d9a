"""Error types."""


class PersistenceUnavailable(Exception):
    """High-score storage could not be read or written."""
