"""Category CRUD operations."""
from typing import Any, Dict

from app.crud.base import CRUDRemoteBase

CATEGORY_FIELDS = (
    "Name", "Tags", "Owner", "CreatedOn", "CreatedBy", "ModifiedOn", "ModifiedBy", "color",
)

CATEGORY_UPDATEABLE_FIELDS = ("Name", "Tags", "Owner", "color")


class CRUDCategory(CRUDRemoteBase):
    """CRUD operations for the categories table."""

    entity = "categories"
    fields = CATEGORY_FIELDS
    updateable_fields = CATEGORY_UPDATEABLE_FIELDS
    order_by = ({"fieldName": "Name", "SortType": "ASC"},)

    def search_params(self, term: str) -> Dict[str, Any]:
        return {"where": [{"fieldName": "Name", "operator": "Contains", "values": [term]}]}
