"""In-memory implementation of ServiceRepository for testing."""

from domain.model.service import Service


class FakeServiceRepository:
    def __init__(self, services: list[Service] | None = None):
        self.store: dict[str, Service] = {s.id: s for s in services or []}

    def add(self, service: Service) -> Service:
        self.store[service.id] = service
        return service

    def list_active(self) -> list[Service]:
        return [s for s in self.store.values() if s.is_active]
