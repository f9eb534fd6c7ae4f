# restaurant/services/catalog_client.py
from dataclasses import dataclass
from decimal import Decimal
from urllib.parse import quote

import requests

from restaurant.utils.retry import http_retry
from restaurant.utils.settings import CATALOG_SERVICE_URL
from restaurant.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CatalogItem:
    id: int
    name: str
    price: Decimal


class CatalogClient:
    """Catalog lookup against the remote catalog service."""

    def __init__(self, base_url: str | None = None, timeout: int = 2):
        self.base_url = (base_url or CATALOG_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def find_food_item_by_name(self, name: str) -> CatalogItem | None:
        url = f"{self.base_url}/food-items/by-name/{quote(name, safe='')}"
        logger.info(f"CatalogClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()

        data = resp.json()
        return CatalogItem(
            id=int(data["id"]),
            name=data["name"],
            price=Decimal(str(data["price"])),
        )
