import os
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import FastAPI, HTTPException, Depends, Header, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr, Field
from passlib.context import CryptContext
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import jwt
import stripe

from database import db, create_document, get_documents, update_document, delete_document
from schemas import Document, User, Brand, Category, Product, Cart, Address, Order
from catalog import build_product_query, find_products, embed_brands
from ordering import OrderStatus, PaymentMode, InvalidTransition, create_order, update_status
from validation import InvalidInput, parse_object_id, parse_bool, require_positive_int

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger("storefront")

# Security
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)
JWT_SECRET = os.getenv("JWT_SECRET", "devsecret_change_me")
JWT_EXP_MIN = int(os.getenv("JWT_EXP_MIN", "60"))
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"

# Configuration
STORE_NAME = os.getenv("STORE_NAME", "Storefront")
PRIMARY_CURRENCY = os.getenv("PRIMARY_CURRENCY", "INR")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
ENABLE_SEED = os.getenv("ENABLE_SEED", "false").lower() == "true"

# Payments
STRIPE_SECRET = os.getenv("STRIPE_SECRET_KEY")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")
if STRIPE_SECRET:
    stripe.api_key = STRIPE_SECRET


@asynccontextmanager
async def lifespan(app: FastAPI):
    db["user"].create_index("email", unique=True)
    db["product"].create_index([("brand", 1), ("category", 1)])
    db["cart"].create_index("user")
    db["order"].create_index([("user", 1), ("createdAt", -1)])
    yield


app = FastAPI(title=f"{STORE_NAME} API", version="1.0.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in ALLOWED_ORIGINS if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)


# Utilities
class TokenData(BaseModel):
    user_id: str
    email: EmailStr
    is_admin: bool = False


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


def create_token(user_doc: Dict[str, Any]) -> str:
    payload = {
        "sub": str(user_doc.get("_id")),
        "email": user_doc.get("email"),
        "isAdmin": bool(user_doc.get("isAdmin", False)),
        "exp": datetime.now(timezone.utc) + timedelta(minutes=JWT_EXP_MIN),
        "iat": datetime.now(timezone.utc),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm="HS256")


def decode_token(token: str) -> TokenData:
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=["HS256"])
        return TokenData(user_id=payload["sub"], email=payload["email"], is_admin=payload.get("isAdmin", False))
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")


def set_token_cookie(response: Response, user_doc: Dict[str, Any]):
    response.set_cookie(
        key="token",
        value=create_token(user_doc),
        max_age=JWT_EXP_MIN * 60,
        httponly=True,
        samesite="lax",
        secure=COOKIE_SECURE,
    )


def serialize(value):
    """Make a Mongo document JSON-ready. Password hashes never leave the server."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items() if k != "passwordHash"}
    if isinstance(value, list):
        return [serialize(v) for v in value]
    return value


async def get_optional_user(request: Request, authorization: Optional[str] = Header(default=None)) -> Optional[Dict[str, Any]]:
    token = request.cookies.get("token")
    if authorization:
        scheme, _, bearer = authorization.partition(" ")
        if scheme.lower() != "bearer" or not bearer:
            raise HTTPException(status_code=401, detail="Invalid authorization header")
        token = bearer
    if not token:
        return None
    token_data = decode_token(token)
    try:
        user_id = ObjectId(token_data.user_id)
    except InvalidId:
        raise HTTPException(status_code=401, detail="Invalid token")
    user = db["user"].find_one({"_id": user_id})
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    if not user.get("isEnabled", True):
        raise HTTPException(status_code=403, detail="Your account has been disabled")
    return user


async def get_listing_caller(request: Request, authorization: Optional[str] = Header(default=None)) -> Optional[Dict[str, Any]]:
    """Caller for public reads: bad or stale credentials browse anonymously."""
    try:
        return await get_optional_user(request, authorization)
    except HTTPException:
        return None


async def get_current_user(user: Optional[Dict[str, Any]] = Depends(get_optional_user)) -> Dict[str, Any]:
    if not user:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def require_admin(user: Dict[str, Any]):
    if not user.get("isAdmin"):
        raise HTTPException(status_code=403, detail="Admin only")


def require_self_or_admin(user: Dict[str, Any], owner_id):
    if user.get("isAdmin"):
        return
    if str(user["_id"]) != str(owner_id):
        raise HTTPException(status_code=403, detail="Forbidden")


def find_or_404(collection_name: str, doc_id: str, label: str) -> Dict[str, Any]:
    doc = db[collection_name].find_one({"_id": parse_object_id(doc_id, f"{label.lower()} id")})
    if not doc:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return doc


# Error handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [{"loc": [str(p) for p in e.get("loc", ())], "msg": e.get("msg", "")} for e in exc.errors()]
    first = errors[0] if errors else {"loc": [], "msg": "Invalid request"}
    message = f"{'.'.join(first['loc'][1:]) or 'request'}: {first['msg']}"
    return JSONResponse(status_code=400, content={"message": message, "errors": errors})


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
    return JSONResponse(status_code=400, content={"message": str(exc)})


@app.exception_handler(InvalidTransition)
async def invalid_transition_handler(request: Request, exc: InvalidTransition):
    return JSONResponse(status_code=409, content={"message": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# Health and config
@app.get("/")
def root():
    return {"name": STORE_NAME, "status": "ok"}


@app.get("/config")
def get_config():
    return {
        "storeName": STORE_NAME,
        "currency": PRIMARY_CURRENCY,
        "paymentModes": [m.value for m in PaymentMode],
        "orderStatuses": [s.value for s in OrderStatus],
        "payments": {"stripe": bool(STRIPE_SECRET)},
    }


# Auth
class SignupDTO(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=8)


class LoginDTO(BaseModel):
    # plain str: a malformed email must fail like an unknown one
    email: str
    password: str


@app.post("/auth/signup", status_code=201)
def signup(data: SignupDTO, response: Response):
    email = data.email.lower()
    if db["user"].find_one({"email": email}):
        raise HTTPException(status_code=400, detail="User already exists")
    user = User(name=data.name, email=email, password_hash=hash_password(data.password))
    try:
        user_id = create_document("user", user)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="User already exists")
    doc = db["user"].find_one({"_id": ObjectId(user_id)})
    set_token_cookie(response, doc)
    logger.info("User %s signed up", user_id)
    return serialize(doc)


@app.post("/auth/login")
def login(data: LoginDTO, response: Response):
    user = db["user"].find_one({"email": data.email.strip().lower()})
    if not user or not verify_password(data.password, user.get("passwordHash", "")):
        logger.warning("Failed login for %s", data.email)
        raise HTTPException(status_code=404, detail="Invalid Credentials")
    if not user.get("isEnabled", True):
        raise HTTPException(status_code=403, detail="Your account has been disabled. Please contact support.")
    set_token_cookie(response, user)
    return serialize(user)


@app.get("/auth/check-auth")
def check_auth(user: Dict[str, Any] = Depends(get_current_user)):
    return serialize(user)


@app.post("/auth/logout")
def logout(response: Response):
    response.delete_cookie("token")
    return {"message": "Logout successful"}


# Brands and categories
@app.get("/brands")
def list_brands():
    return serialize(get_documents("brand"))


@app.post("/brands", status_code=201)
def create_brand(data: Brand, user: Dict[str, Any] = Depends(get_current_user)):
    require_admin(user)
    brand_id = create_document("brand", data)
    return serialize(db["brand"].find_one({"_id": ObjectId(brand_id)}))


@app.get("/categories")
def list_categories():
    return serialize(get_documents("category"))


@app.post("/categories", status_code=201)
def create_category(data: Category, user: Dict[str, Any] = Depends(get_current_user)):
    require_admin(user)
    cat_id = create_document("category", data)
    return serialize(db["category"].find_one({"_id": ObjectId(cat_id)}))


# Products
class ProductUpdateDTO(Document):
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    discount_percentage: Optional[float] = Field(None, ge=0, le=100)
    stock_quantity: Optional[int] = Field(None, ge=0)
    brand: Optional[str] = None
    category: Optional[str] = None
    thumbnail: Optional[str] = None
    images: Optional[List[str]] = None


def product_refs(fields: Dict[str, Any]) -> Dict[str, Any]:
    for key in ("brand", "category"):
        if key in fields:
            fields[key] = parse_object_id(fields[key], key)
    return fields


@app.get("/products")
def list_products(
    response: Response,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    sort: Optional[str] = None,
    order: Optional[str] = None,
    brand: Optional[List[str]] = Query(default=None),
    category: Optional[List[str]] = Query(default=None),
    user: Optional[str] = None,
    include_deleted: Optional[str] = Query(default=None, alias="includeDeleted"),
    caller: Optional[Dict[str, Any]] = Depends(get_listing_caller),
):
    is_admin = bool(caller and caller.get("isAdmin"))
    query = build_product_query(
        page=page,
        limit=limit,
        sort=sort,
        order=order,
        brand=brand,
        category=category,
        user=parse_bool(user),
        include_deleted=is_admin and parse_bool(include_deleted),
    )
    items, total = find_products(db["product"], query)
    response.headers["X-Total-Count"] = str(total)
    return serialize(embed_brands(db["brand"], items))


@app.post("/products", status_code=201)
def create_product(data: Product, user: Dict[str, Any] = Depends(get_current_user)):
    require_admin(user)
    fields = product_refs(data.model_dump(by_alias=True))
    product_id = create_document("product", fields)
    logger.info("Product %s created by %s", product_id, user["_id"])
    return serialize(db["product"].find_one({"_id": ObjectId(product_id)}))


@app.get("/products/{product_id}")
def get_product(product_id: str):
    p = find_or_404("product", product_id, "Product")
    return serialize(embed_brands(db["brand"], [p])[0])


@app.put("/products/{product_id}")
def update_product(product_id: str, data: ProductUpdateDTO, user: Dict[str, Any] = Depends(get_current_user)):
    require_admin(user)
    oid = parse_object_id(product_id, "product id")
    changes = product_refs(data.model_dump(by_alias=True, exclude_none=True))
    updated = update_document("product", oid, changes)
    if not updated:
        raise HTTPException(status_code=404, detail="Product not found")
    return serialize(updated)


@app.delete("/products/{product_id}")
def delete_product(product_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    require_admin(user)
    deleted = delete_document("product", parse_object_id(product_id, "product id"))
    if not deleted:
        raise HTTPException(status_code=404, detail="Product not found")
    logger.info("Product %s deleted by %s", product_id, user["_id"])
    return serialize(deleted)


@app.patch("/products/undelete/{product_id}")
def undelete_product(product_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    require_admin(user)
    restored = update_document("product", parse_object_id(product_id, "product id"), {"isDeleted": False})
    if not restored:
        raise HTTPException(status_code=404, detail="Product not found")
    return serialize(restored)


# Cart
class CartUpdateDTO(BaseModel):
    quantity: int = Field(..., ge=1)


@app.post("/cart", status_code=201)
def cart_add(item: Cart, user: Dict[str, Any] = Depends(get_current_user)):
    owner = item.user or str(user["_id"])
    require_self_or_admin(user, owner)
    product_id = parse_object_id(item.product, "product")
    product = db["product"].find_one({"_id": product_id})
    if not product or product.get("isDeleted"):
        raise InvalidInput(f"Product {product_id} is not available")
    cart_id = create_document("cart", {"user": parse_object_id(owner, "user"), "product": product_id, "quantity": item.quantity})
    return serialize(db["cart"].find_one({"_id": ObjectId(cart_id)}))


@app.get("/cart/{user_id}")
def cart_get(user_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    require_self_or_admin(user, user_id)
    items = db["cart"].find({"user": parse_object_id(user_id, "user id")}).sort("createdAt", 1)
    return serialize(list(items))


@app.put("/cart/{cart_id}")
def cart_update(cart_id: str, data: CartUpdateDTO, user: Dict[str, Any] = Depends(get_current_user)):
    existing = find_or_404("cart", cart_id, "Cart item")
    require_self_or_admin(user, existing["user"])
    updated = update_document("cart", existing["_id"], {"quantity": data.quantity})
    if not updated:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return serialize(updated)


@app.delete("/cart/user/{user_id}", status_code=204)
def cart_reset(user_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    require_self_or_admin(user, user_id)
    res = db["cart"].delete_many({"user": parse_object_id(user_id, "user id")})
    logger.info("Cleared %d cart items for user %s", res.deleted_count, user_id)
    return Response(status_code=204)


@app.delete("/cart/{cart_id}")
def cart_remove(cart_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    existing = find_or_404("cart", cart_id, "Cart item")
    require_self_or_admin(user, existing["user"])
    deleted = delete_document("cart", existing["_id"])
    if not deleted:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return serialize(deleted)


# Orders
class OrderStatusDTO(BaseModel):
    status: str


def start_card_payment(order: Dict[str, Any]) -> Optional[str]:
    if order["paymentMode"] != PaymentMode.CARD.value or not STRIPE_SECRET:
        return None
    intent = stripe.PaymentIntent.create(
        amount=int(round(order["total"] * 100)),
        currency=PRIMARY_CURRENCY.lower(),
        metadata={"order_id": str(order["_id"])},
    )
    db["order"].update_one({"_id": order["_id"]}, {"$set": {"paymentRef": intent.id}})
    order["paymentRef"] = intent.id
    return intent.client_secret


@app.post("/orders", status_code=201)
def order_create(data: Order, user: Dict[str, Any] = Depends(get_current_user)):
    owner = data.user or str(user["_id"])
    require_self_or_admin(user, owner)
    order = create_order(
        db,
        owner,
        items=[i.model_dump() for i in data.item],
        address=[a.model_dump(by_alias=True, exclude_none=True) for a in data.address],
        payment_mode=data.payment_mode,
        total=data.total,
    )
    client_secret = start_card_payment(order)
    result = serialize(order)
    if client_secret:
        result["clientSecret"] = client_secret
    return result


@app.get("/orders")
def order_list(response: Response, page: int = 1, limit: int = 20, user: Dict[str, Any] = Depends(get_current_user)):
    require_admin(user)
    page = require_positive_int(page, "page")
    limit = require_positive_int(limit, "limit")
    response.headers["X-Total-Count"] = str(db["order"].count_documents({}))
    cursor = db["order"].find({}).sort([("createdAt", -1), ("_id", -1)]).skip((page - 1) * limit).limit(limit)
    return serialize(list(cursor))


@app.get("/orders/user/{user_id}")
def order_list_for_user(user_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    require_self_or_admin(user, user_id)
    cursor = db["order"].find({"user": parse_object_id(user_id, "user id")}).sort([("createdAt", -1), ("_id", -1)])
    return serialize(list(cursor))


@app.get("/orders/{order_id}")
def order_get(order_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    o = find_or_404("order", order_id, "Order")
    require_self_or_admin(user, o["user"])
    return serialize(o)


@app.api_route("/orders/{order_id}", methods=["PUT", "PATCH"])
def order_update_status(order_id: str, data: OrderStatusDTO, user: Dict[str, Any] = Depends(get_current_user)):
    o = find_or_404("order", order_id, "Order")
    if not user.get("isAdmin"):
        require_self_or_admin(user, o["user"])
        if data.status != OrderStatus.CANCELLED.value:
            raise HTTPException(status_code=403, detail="Customers can only cancel orders")
    updated = update_status(db, o["_id"], data.status)
    if updated is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return serialize(updated)


# Addresses
class AddressUpdateDTO(Document):
    name: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    phone_number: Optional[str] = None
    type: Optional[str] = None


@app.post("/addresses", status_code=201)
def address_create(data: Address, user: Dict[str, Any] = Depends(get_current_user)):
    owner = data.user or str(user["_id"])
    require_self_or_admin(user, owner)
    fields = data.model_dump(by_alias=True, exclude_none=True)
    fields["user"] = parse_object_id(owner, "user")
    address_id = create_document("address", fields)
    return serialize(db["address"].find_one({"_id": ObjectId(address_id)}))


@app.get("/addresses/user/{user_id}")
def address_list(user_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    require_self_or_admin(user, user_id)
    return serialize(get_documents("address", {"user": parse_object_id(user_id, "user id")}))


@app.patch("/addresses/{address_id}")
def address_update(address_id: str, data: AddressUpdateDTO, user: Dict[str, Any] = Depends(get_current_user)):
    existing = find_or_404("address", address_id, "Address")
    require_self_or_admin(user, existing["user"])
    updated = update_document("address", existing["_id"], data.model_dump(by_alias=True, exclude_none=True))
    if not updated:
        raise HTTPException(status_code=404, detail="Address not found")
    return serialize(updated)


@app.delete("/addresses/{address_id}")
def address_delete(address_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    existing = find_or_404("address", address_id, "Address")
    require_self_or_admin(user, existing["user"])
    deleted = delete_document("address", existing["_id"])
    if not deleted:
        raise HTTPException(status_code=404, detail="Address not found")
    return serialize(deleted)


# Users
class UserUpdateDTO(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None


@app.get("/users")
def user_list(exclude_admins: Optional[str] = Query(default=None, alias="excludeAdmins"), user: Dict[str, Any] = Depends(get_current_user)):
    require_admin(user)
    query = {"isAdmin": {"$ne": True}} if parse_bool(exclude_admins) else {}
    return serialize(get_documents("user", query))


@app.get("/users/{user_id}")
def user_get(user_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    require_self_or_admin(user, user_id)
    return serialize(find_or_404("user", user_id, "User"))


@app.patch("/users/{user_id}")
def user_update(user_id: str, data: UserUpdateDTO, user: Dict[str, Any] = Depends(get_current_user)):
    require_self_or_admin(user, user_id)
    oid = parse_object_id(user_id, "user id")
    changes = data.model_dump(exclude_none=True)
    if "email" in changes:
        changes["email"] = changes["email"].lower()
        clash = db["user"].find_one({"email": changes["email"], "_id": {"$ne": oid}})
        if clash:
            raise HTTPException(status_code=400, detail="Email already in use")
    updated = update_document("user", oid, changes)
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")
    return serialize(updated)


@app.patch("/users/{user_id}/toggle-status")
def user_toggle_status(user_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    require_admin(user)
    target = find_or_404("user", user_id, "User")
    enabled = not target.get("isEnabled", True)
    updated = update_document("user", target["_id"], {"isEnabled": enabled})
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info("User %s %s by %s", user_id, "enabled" if enabled else "disabled", user["_id"])
    return serialize(updated)


# Stripe webhook
@app.post("/webhooks/stripe")
async def stripe_webhook(request: Request):
    if not STRIPE_SECRET:
        return {"received": False}
    payload = await request.body()
    sig = request.headers.get("Stripe-Signature")
    try:
        if STRIPE_WEBHOOK_SECRET:
            event = stripe.Webhook.construct_event(payload, sig, STRIPE_WEBHOOK_SECRET)
        else:
            event = stripe.Event.construct_from(await request.json(), stripe.api_key)
    except (ValueError, stripe.SignatureVerificationError):
        return JSONResponse(status_code=400, content={"message": "Invalid payload"})

    if event.type == "payment_intent.succeeded":
        metadata = getattr(event.data.object, "metadata", None) or {}
        order_id = metadata["order_id"] if "order_id" in metadata else None
        if order_id:
            db["order"].update_one(
                {"_id": parse_object_id(order_id, "order id")},
                {"$set": {"paymentStatus": "paid", "updatedAt": datetime.now(timezone.utc)}},
            )
            logger.info("Order %s paid", order_id)
    return {"received": True}


# Sample seed endpoint (dev only)
@app.post("/dev/seed")
def seed():
    if not ENABLE_SEED:
        raise HTTPException(status_code=404, detail="Not found")
    if not db["user"].find_one({"email": "admin@storefront.dev"}):
        admin = User(name="Admin", email="admin@storefront.dev", password_hash=hash_password("admin1234"), is_admin=True)
        create_document("user", admin)
    if db["product"].count_documents({}) == 0:
        apple = ObjectId(create_document("brand", Brand(name="Apple")))
        sony = ObjectId(create_document("brand", Brand(name="Sony")))
        phones = ObjectId(create_document("category", Category(name="smartphones")))
        audio = ObjectId(create_document("category", Category(name="audio")))
        samples = [
            ("iPhone 14", "A15 Bionic with a stunning display.", 69999, 10, 15, apple, phones),
            ("WH-1000XM5", "Noise cancelling over-ear headphones.", 29990, 12, 40, sony, audio),
            ("AirPods Pro", "Active noise cancellation earbuds.", 24900, 5, 60, apple, audio),
        ]
        for title, description, price, discount, stock, brand_id, category_id in samples:
            create_document("product", {
                "title": title,
                "description": description,
                "price": price,
                "discountPercentage": discount,
                "stockQuantity": stock,
                "brand": brand_id,
                "category": category_id,
                "thumbnail": "https://images.unsplash.com/photo-1511707171634-5f897ff02aa9",
                "images": [],
                "isDeleted": False,
            })
    return {"ok": True, "products": db["product"].count_documents({})}


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
