"""Property repositories."""

from decimal import Decimal

from ...core.pagination import ListOptions, Page
from ...core.repositories import DocumentRepository, ForeignKey, Repository, SQLRepository
from .models import Property, PropertyStatus
from .schemas import PropertyCreate, PropertyResponse, PropertyUpdate


class PropertyRepository(Repository[PropertyResponse]):
    resource_type = "Property"
    create_schema = PropertyCreate
    update_schema = PropertyUpdate
    read_schema = PropertyResponse
    relations = {"landlord": ("landlord_id", "users")}

    async def find_by_landlord_id(
        self, landlord_id: str, options: ListOptions | None = None
    ) -> Page[PropertyResponse]:
        return await self.list((options or ListOptions()).with_filters(landlord_id=landlord_id))

    async def search_by_location(
        self,
        city: str | None = None,
        state: str | None = None,
        zip_code: str | None = None,
        options: ListOptions | None = None,
    ) -> Page[PropertyResponse]:
        """Case-insensitive partial match on city and state; exact zip."""
        filters = {}
        if city:
            filters["address_city"] = {"icontains": city}
        if state:
            filters["address_state"] = {"icontains": state}
        if zip_code:
            filters["address_zip"] = zip_code
        return await self.list((options or ListOptions()).with_filters(**filters))

    async def filter_by_criteria(
        self,
        min_rent: Decimal | None = None,
        max_rent: Decimal | None = None,
        bedrooms: int | None = None,
        bathrooms: Decimal | None = None,
        status: PropertyStatus | str | None = None,
        options: ListOptions | None = None,
    ) -> Page[PropertyResponse]:
        filters = {"bedrooms": bedrooms, "bathrooms": bathrooms, "status": status}
        if min_rent is not None or max_rent is not None:
            filters["rent_amount"] = {"gte": min_rent, "lte": max_rent}
        return await self.list((options or ListOptions()).with_filters(**filters))

    async def find_available(self, options: ListOptions | None = None) -> Page[PropertyResponse]:
        return await self.list(
            (options or ListOptions()).with_filters(
                is_available=True, status=PropertyStatus.ACTIVE
            )
        )


class SQLPropertyRepository(SQLRepository[PropertyResponse], PropertyRepository):
    model = Property


class DocumentPropertyRepository(DocumentRepository[PropertyResponse], PropertyRepository):
    collection = "properties"
    required_fields = ("landlord_id", "title", "rent_amount")
    foreign_keys = {"landlord_id": ForeignKey("users")}
