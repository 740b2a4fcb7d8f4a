# src/diagnosis/catalog.py — v1
"""Product recommendations attached to a fresh diagnosis."""

from __future__ import annotations

from abc import ABC, abstractmethod

from avidiag.diagnosis.models import Product

_STATIC_PRODUCTS: tuple[Product, ...] = (
    Product(
        id="1",
        name="Antibiotique Large Spectre",
        description="Efficace contre les infections respiratoires et digestives",
        price=2500,
        category="medicine",
        seller="VetMed Solutions",
        rating=4.8,
        image="https://images.unsplash.com/photo-1584308666744-24d5c474f2ae?w=200&h=200&fit=crop",
        in_stock=True,
    ),
    Product(
        id="2",
        name="Supplément Vitamine C",
        description="Renforce le système immunitaire des volailles",
        price=1200,
        category="supplement",
        seller="AgriSupply Co.",
        rating=4.5,
        image="https://images.unsplash.com/photo-1550572017-edd951aa8f72?w=200&h=200&fit=crop",
        in_stock=True,
    ),
    Product(
        id="3",
        name="Désinfectant Poulailler",
        description="Prévention et traitement des infections",
        price=1800,
        category="hygiene",
        seller="FarmCare Pro",
        rating=4.7,
        image="https://images.unsplash.com/photo-1563453392212-326f5e854473?w=200&h=200&fit=crop",
        in_stock=True,
    ),
)


class ProductCatalog(ABC):
    """Source of products to recommend for a diagnosis."""

    @abstractmethod
    def get_recommended_products(self, diagnosis: str) -> list[Product]:
        """Products to show next to the given diagnosis."""


class StaticProductCatalog(ProductCatalog):
    """Fixed three-product slice, identical for every diagnosis.

    The diagnosis is accepted but not used yet.
    TODO: filter by product category once the marketplace exposes a
    diagnosis → category mapping.
    """

    def get_recommended_products(self, diagnosis: str) -> list[Product]:
        return [p.model_copy() for p in _STATIC_PRODUCTS]
