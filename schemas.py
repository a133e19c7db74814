"""
Request and document models for the shop.

Users, catalog entries, cart rows, addresses and orders each live in their own collection,
named after the model in lower case (Product -> "product", Cart -> "cart").

Attributes are snake_case in Python and stored/served in camelCase (isEnabled, stockQuantity, ...),
which is the wire format the storefront client speaks. Dump with by_alias=True before inserting.
References to other documents arrive as id strings and are stored as ObjectIds by the handlers.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, EmailStr
from pydantic.alias_generators import to_camel

from ordering import PaymentMode


class Document(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class User(Document):
    name: str
    email: EmailStr
    password_hash: str
    is_enabled: bool = True
    is_admin: bool = False


class Brand(Document):
    name: str = Field(..., min_length=1)


class Category(Document):
    name: str = Field(..., min_length=1)


class Product(Document):
    title: str
    description: str
    price: float = Field(..., ge=0)
    discount_percentage: float = Field(0, ge=0, le=100)
    stock_quantity: int = Field(..., ge=0)
    brand: str
    category: str
    thumbnail: str
    images: List[str] = []
    is_deleted: bool = False


class Cart(Document):
    user: Optional[str] = Field(None, description="defaults to the caller")
    product: str
    quantity: int = Field(1, ge=1)


class Address(Document):
    user: Optional[str] = Field(None, description="defaults to the caller")
    name: Optional[str] = None
    street: str
    city: str
    state: str
    country: str
    postal_code: str
    phone_number: str
    type: str = Field("Home", description="Home | Office | Other")


class OrderItem(Document):
    product: str
    quantity: int = Field(..., ge=1)
    price: Optional[float] = Field(None, description="ignored; snapshotted from the catalog")


class ShippingAddress(Document):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    street: str
    city: str
    state: Optional[str] = None
    country: str


class Order(Document):
    # status, paymentStatus and the line prices are set by the order workflow
    user: Optional[str] = Field(None, description="defaults to the caller")
    item: List[OrderItem] = Field(..., min_length=1)
    address: List[ShippingAddress] = Field(..., min_length=1)
    total: Optional[float] = Field(None, ge=0)
    payment_mode: PaymentMode
