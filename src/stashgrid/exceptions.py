class StashgridError(Exception):
    """Base exception for the stashgrid project."""


class CatalogError(StashgridError):
    """Raised when an item catalog cannot be loaded or an item is required but unknown."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = list(errors or [])

    def to_human(self) -> str:
        parts = [str(self)]
        for e in self.errors:
            parts.append(f" - {e}")
        return "\n".join(parts)


class LayoutError(StashgridError):
    """Raised for malformed region layout configuration."""


class IntegrityError(StashgridError):
    """Raised when an equipment aggregate violates its cell invariants."""


class SnapshotError(StashgridError):
    """Raised when an aggregate snapshot cannot be decoded."""
