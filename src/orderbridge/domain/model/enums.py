"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Platform(StrEnum):
    AMAZON = "Amazon"
    EBAY = "eBay"


class CustomerType(StrEnum):
    PRIVATE = "Privat"
    BUSINESS = "Firma"


class OrderStatus(StrEnum):
    OPEN = "Offen"
    SHIPPED = "Versendet"
