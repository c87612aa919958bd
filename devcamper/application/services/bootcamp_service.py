from __future__ import annotations

from typing import Any, Dict

from ...domain.errors import ResourceNotFound
from ...domain.models import Bootcamp
from ...domain.ports.persistence import BootcampRepository
from ..pagination import Page, offset_for


class BootcampService:
    """CRUD operations over bootcamp listings."""

    def __init__(self, bootcamps: BootcampRepository) -> None:
        self._bootcamps = bootcamps

    def list_bootcamps(self, page: int, limit: int) -> Page[Bootcamp]:
        items = self._bootcamps.list_bootcamps(offset_for(page, limit), limit)
        return Page(items=items, total=self._bootcamps.count_bootcamps(), page=page, limit=limit)

    def get_bootcamp(self, bootcamp_id: int) -> Bootcamp:
        bootcamp = self._bootcamps.get_bootcamp(bootcamp_id)
        if not bootcamp:
            raise ResourceNotFound(f"Bootcamp not found with id of {bootcamp_id}.")
        return bootcamp

    def create_bootcamp(self, fields: Dict[str, Any]) -> Bootcamp:
        return self._bootcamps.create_bootcamp(fields)

    def update_bootcamp(self, bootcamp_id: int, fields: Dict[str, Any]) -> Bootcamp:
        bootcamp = self._bootcamps.update_bootcamp(bootcamp_id, fields)
        if not bootcamp:
            raise ResourceNotFound(f"Bootcamp not found with id of {bootcamp_id}.")
        return bootcamp

    def delete_bootcamp(self, bootcamp_id: int) -> None:
        if not self._bootcamps.delete_bootcamp(bootcamp_id):
            raise ResourceNotFound(f"Bootcamp not found with id of {bootcamp_id}.")
