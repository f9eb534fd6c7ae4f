from dataclasses import dataclass
from typing import Union

from restaurant.domain.errors import InvalidValueError


@dataclass(frozen=True)
class TableLocation:
    table_number: str


@dataclass(frozen=True)
class AddressLocation:
    address_id: int


Location = Union[TableLocation, AddressLocation]


def location_from(table_number: str | None, address_id: int | None) -> Location | None:
    """Stolik albo adres. Oba naraz to blad, zaden daje None."""
    if table_number is not None and address_id is not None:
        raise InvalidValueError("Order", "location", "either a table or an address, not both")
    if table_number is not None:
        return TableLocation(table_number)
    if address_id is not None:
        return AddressLocation(address_id)
    return None
