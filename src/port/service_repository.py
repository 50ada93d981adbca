from typing import Protocol

from domain.model.service import Service


class ServiceRepository(Protocol):
    """Protocol defining the interface for service catalogue reads."""
    def list_active(self) -> list[Service]:
        """Return every service with is_active set. Raises UpstreamUnavailableError on store failure."""
        ...
