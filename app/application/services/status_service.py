"""Order status catalog service."""

import structlog

from app.core.exceptions import (
    BusinessRuleViolationException,
    DuplicateResourceException,
    EntityNotFoundException,
)
from app.domain.mapping import status_mapper
from app.domain.models.status import Status
from app.domain.repositories.order import OrderRepository, StatusRepository
from app.domain.schemas.common import Page, PageRequest
from app.domain.schemas.order import StatusCreate, StatusResponse, StatusUpdate

logger = structlog.get_logger(__name__)


class StatusService:
    def __init__(self, statuses: StatusRepository, orders: OrderRepository):
        self.statuses = statuses
        self.orders = orders

    def create(self, request: StatusCreate) -> StatusResponse:
        if self.statuses.exists_by_name(request.name):
            raise DuplicateResourceException("Status", "name", request.name)

        status = self.statuses.create(status_mapper.to_entity(request))
        logger.info("Status created", status_id=status.id, name=status.name)
        return status_mapper.to_response(status)

    def get(self, status_id: int) -> StatusResponse:
        return status_mapper.to_response(self.get_entity(status_id))

    def get_by_name(self, name: str) -> StatusResponse:
        status = self.statuses.find_by_name(name)
        if status is None:
            raise EntityNotFoundException("Status", "name", name)
        return status_mapper.to_response(status)

    def get_entity(self, status_id: int) -> Status:
        status = self.statuses.get_by_id(status_id)
        if status is None:
            raise EntityNotFoundException("Status", "id", status_id)
        return status

    def update(self, status_id: int, request: StatusUpdate) -> StatusResponse:
        status = self.get_entity(status_id)
        if request.name is not None and request.name != status.name and self.statuses.exists_by_name(request.name):
            raise DuplicateResourceException("Status", "name", request.name)

        status = self.statuses.update(status_mapper.apply_update(status, request))
        logger.info("Status updated", status_id=status.id)
        return status_mapper.to_response(status)

    def delete(self, status_id: int) -> None:
        status = self.get_entity(status_id)
        in_use = self.orders.count_by_status_id(status.id)
        if in_use:
            raise BusinessRuleViolationException(
                f"Status '{status.name}' is used by {in_use} order(s)",
                details={"status_id": status.id, "orders": in_use},
            )
        self.statuses.delete(status)
        logger.info("Status deleted", status_id=status_id)

    def list(self, page: PageRequest) -> Page:
        return self.statuses.list(page).map(status_mapper.to_response)

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        return self.statuses.search_by_name(term, page).map(status_mapper.to_response)
