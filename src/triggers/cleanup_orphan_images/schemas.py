from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional, List


class ProductDocument(BaseModel):
    """Documento de products/{id}; só interessam as URLs de imagem."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    # Cada item é validado na extração do public_id, um por um.
    image_urls: Optional[List[Any]] = Field(None, alias="imageUrls")


class StoreDetailsDocument(BaseModel):
    """settings/store_details."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    logo_url: Optional[str] = Field(None, alias="logoUrl")


class SlideEntry(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    image_url: Optional[str] = Field(None, alias="imageUrl")


class HeroSliderDocument(BaseModel):
    """settings/hero_slider: lista ordenada de slides (validados um a um com SlideEntry)."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    slides: Optional[List[Any]] = None
