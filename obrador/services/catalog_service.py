from __future__ import annotations

import logging
from decimal import Decimal

from obrador.models.service import Service
from obrador.repositories.base import ServiceRepository

logger = logging.getLogger(__name__)


def _validate(name: str, base_price: Decimal, unit: str) -> None:
    if not name.strip():
        raise ValueError("Service name is required")
    if base_price < 0:
        raise ValueError("Service price must not be negative")
    if not unit.strip():
        raise ValueError("Service unit is required")


class CatalogService:
    def __init__(self, repo: ServiceRepository) -> None:
        self.repo = repo

    def create_service(self, name: str, base_price: Decimal, unit: str) -> Service:
        _validate(name, base_price, unit)
        service = Service(name=name.strip(), base_price=base_price, unit=unit.strip())
        result = self.repo.create(service)
        logger.info("Service created: id=%s name=%s price=%s/%s", result.id, result.name, base_price, result.unit)
        return result

    def list_services(self) -> list[Service]:
        return self.repo.list_all()

    def get_service(self, service_id: int) -> Service | None:
        logger.debug("Looking up service id=%s", service_id)
        return self.repo.get_by_id(service_id)

    def get_catalog(self, service_ids: list[int]) -> dict[int, Service]:
        return self.repo.get_many(service_ids)

    def update_service(self, service: Service) -> Service:
        _validate(service.name, service.base_price, service.unit)
        result = self.repo.update(service)
        logger.info("Service updated: id=%s name=%s price=%s", result.id, result.name, result.base_price)
        return result

    def delete_service(self, service_id: int) -> None:
        self.repo.delete(service_id)
        logger.info("Service deleted: id=%s", service_id)
