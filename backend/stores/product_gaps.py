"""
Helios Intel - Product Gap Store
"""

from constants import GAP_STORE_KEY, PRODUCT_GAPS_UPDATED_EVENT
from schemas.workspace import ProductGap
from stores.base import CollectionStore


class ProductGapStore(CollectionStore[ProductGap]):
    storage_key = GAP_STORE_KEY
    event_name = PRODUCT_GAPS_UPDATED_EVENT
    model = ProductGap
    timestamp_field = "saved_at"
