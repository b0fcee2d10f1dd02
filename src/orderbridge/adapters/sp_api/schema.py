"""Pydantic models describing the Selling Partner API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class SellingPartnerBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Money(SellingPartnerBaseModel):
    currency_code: str | None = Field(default=None, alias="CurrencyCode")
    amount: str | None = Field(default=None, alias="Amount")

    _normalize_amount = field_validator("amount", mode="before")(_blank_to_none)


class BuyerInfo(SellingPartnerBaseModel):
    buyer_email: str | None = Field(default=None, alias="BuyerEmail")
    buyer_name: str | None = Field(default=None, alias="BuyerName")

    _normalize_text = field_validator("buyer_email", "buyer_name", mode="before")(_blank_to_none)


class ShippingAddress(SellingPartnerBaseModel):
    name: str | None = Field(default=None, alias="Name")
    address_line_1: str | None = Field(default=None, alias="AddressLine1")
    address_line_2: str | None = Field(default=None, alias="AddressLine2")
    city: str | None = Field(default=None, alias="City")
    postal_code: str | None = Field(default=None, alias="PostalCode")
    country_code: str | None = Field(default=None, alias="CountryCode")
    phone: str | None = Field(default=None, alias="Phone")

    _normalize_text = field_validator(
        "name",
        "address_line_1",
        "address_line_2",
        "city",
        "postal_code",
        "country_code",
        "phone",
        mode="before",
    )(_blank_to_none)


class RemoteOrder(SellingPartnerBaseModel):
    amazon_order_id: str = Field(alias="AmazonOrderId")
    purchase_date: str = Field(default="", alias="PurchaseDate")
    order_status: str | None = Field(default=None, alias="OrderStatus")
    buyer_info: BuyerInfo | None = Field(default=None, alias="BuyerInfo")
    shipping_address: ShippingAddress | None = Field(default=None, alias="ShippingAddress")

    @property
    def is_cancelled(self) -> bool:
        return self.order_status == "Canceled"


class OrdersPayload(SellingPartnerBaseModel):
    orders: list[RemoteOrder] = Field(default_factory=list[RemoteOrder], alias="Orders")
    next_token: str | None = Field(default=None, alias="NextToken")

    _normalize_next_token = field_validator("next_token", mode="before")(_blank_to_none)


class OrdersResponse(SellingPartnerBaseModel):
    payload: OrdersPayload = Field(default_factory=OrdersPayload)


class RemoteOrderItem(SellingPartnerBaseModel):
    order_item_id: str = Field(default="", alias="OrderItemId")
    seller_sku: str | None = Field(default=None, alias="SellerSKU")
    title: str | None = Field(default=None, alias="Title")
    quantity_ordered: int = Field(default=1, alias="QuantityOrdered")
    item_price: Money | None = Field(default=None, alias="ItemPrice")
    shipping_price: Money | None = Field(default=None, alias="ShippingPrice")


class OrderItemsPayload(SellingPartnerBaseModel):
    amazon_order_id: str | None = Field(default=None, alias="AmazonOrderId")
    order_items: list[RemoteOrderItem] = Field(
        default_factory=list[RemoteOrderItem], alias="OrderItems"
    )
    next_token: str | None = Field(default=None, alias="NextToken")

    _normalize_next_token = field_validator("next_token", mode="before")(_blank_to_none)


class OrderItemsResponse(SellingPartnerBaseModel):
    payload: OrderItemsPayload = Field(default_factory=OrderItemsPayload)


class TokenResponse(SellingPartnerBaseModel):
    access_token: str
    token_type: str | None = None
    expires_in: int = 3600


class RestrictedDataTokenResponse(SellingPartnerBaseModel):
    restricted_data_token: str = Field(alias="restrictedDataToken")
    expires_in: int | None = Field(default=None, alias="expiresIn")
