"""
Types for external API lookups.
"""
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class BarcodeProduct:
    """Product found on Open Food Facts for a barcode."""
    barcode: str
    product_name: Optional[str] = None
    brands: Optional[str] = None
    categories: Optional[str] = None
    ingredients_text: Optional[str] = None
    image_url: Optional[str] = None
    source: str = "open_food_facts"
    raw_response_summary: str = field(default="", repr=False)  # for logging

    def to_dict(self) -> dict:
        return {
            "barcode": self.barcode,
            "product_name": self.product_name,
            "brands": self.brands,
            "categories": self.categories,
            "ingredients_text": self.ingredients_text,
            "image_url": self.image_url,
            "source": self.source,
        }
