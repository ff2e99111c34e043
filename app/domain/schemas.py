# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from decimal import Decimal
from datetime import datetime


class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(..., gt=0, description="Ilość produktu (musi być > 0)")
    size: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, max_length=50)


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., gt=0, description="Nowa ilość (musi być > 0)")


class CartItemOut(BaseModel):
    """Pozycja koszyka wzbogacona o dane produktu."""

    id: int
    user_id: int
    product_id: int
    quantity: int
    size: Optional[str] = None
    color: Optional[str] = None
    name: str
    price: Decimal
    image_url: Optional[str] = None


class CartOut(BaseModel):
    """Podsumowanie koszyka (response)."""

    items: List[CartItemOut]
    total: str
    count: int


class CartActionOut(BaseModel):
    success: bool
    message: str
    cart: Optional[List[CartItemOut]] = None


class RegisterIn(BaseModel):
    """Schema dla rejestracji użytkownika."""

    username: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    # bcrypt bierze max 72 bajty
    password: str = Field(..., min_length=6, max_length=72)
    full_name: str = Field(..., min_length=1, max_length=100, description="Imię i nazwisko")


class LoginIn(BaseModel):
    username: str = Field(..., min_length=1, description="Login albo email")
    password: str = Field(..., min_length=1, max_length=72)


class UserRead(BaseModel):
    """Schema dla użytkownika (response)."""

    id: int
    username: str
    email: str
    full_name: str
    role: str

    model_config = ConfigDict(from_attributes=True)


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    image_url: str = ""


class CategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProductCreate(BaseModel):
    """Schema dla tworzenia produktu (admin)."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., gt=0, decimal_places=2)
    category_id: int = Field(..., gt=0)
    image_url: str = ""
    gallery_images: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    stock_quantity: int = Field(0, ge=0)
    featured: bool = False


class ProductUpdate(BaseModel):
    """Częściowa aktualizacja - tylko przesłane pola."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    category_id: Optional[int] = Field(None, gt=0)
    image_url: Optional[str] = None
    gallery_images: Optional[List[str]] = None
    sizes: Optional[List[str]] = None
    colors: Optional[List[str]] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    featured: Optional[bool] = None


class ProductOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    image_url: Optional[str] = None
    gallery_images: List[str]
    sizes: List[str]
    colors: List[str]
    stock_quantity: int
    featured: bool
    created_at: datetime
    updated_at: datetime


class ShippingAddress(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=2)
    phone: Optional[str] = None


class OrderCreate(BaseModel):
    """Schema dla tworzenia zamówienia z bieżącego koszyka."""

    total_amount: Decimal = Field(..., gt=0, decimal_places=2)
    shipping_address: ShippingAddress
    payment_method: str = Field(..., min_length=1, max_length=50)


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: int
    user_id: int
    status: str
    total_amount: Decimal
    shipping_address: str
    payment_method: str
    estimated_delivery: datetime
    created_at: datetime


class OrderLineOut(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: Decimal
    size: Optional[str] = None
    color: Optional[str] = None
    product_name: Optional[str] = None
    image_url: Optional[str] = None


class OrderDetailOut(OrderOut):
    items: List[OrderLineOut]
