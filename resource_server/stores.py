"""
In-memory record collections, one per resource service instance.
Every read returns a snapshot dict; every write holds the store lock for the whole
read-modify-write of a single record.
"""
import threading
from dataclasses import asdict, dataclass

DEFAULT_DESCRIPTION = ""
DEFAULT_CATEGORY = "General"
DEFAULT_IMAGE = "https://via.placeholder.com/200?text=Product"
DEFAULT_WAREHOUSE = "A"


@dataclass
class Profile:
    user_id: int
    username: str
    email: str
    full_name: str
    bio: str
    avatar: str

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "username": self.username,
            "email": self.email,
            "fullName": self.full_name,
            "bio": self.bio,
            "avatar": self.avatar,
        }


@dataclass
class Product:
    id: int
    name: str
    description: str
    price: float
    category: str
    image: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class StockRecord:
    product_id: int
    stock: int | float
    warehouse: str

    def to_dict(self) -> dict:
        return {"productId": self.product_id, "stock": self.stock, "warehouse": self.warehouse}


class ProfileStore:
    def __init__(self, profiles: list[Profile] | None = None):
        self._lock = threading.Lock()
        self._profiles = {p.user_id: p for p in (profiles or [])}

    def get(self, user_id: int) -> dict | None:
        with self._lock:
            profile = self._profiles.get(user_id)
            return profile.to_dict() if profile else None

    def update(
        self,
        user_id: int,
        *,
        email: str | None = None,
        full_name: str | None = None,
        bio: str | None = None,
    ) -> dict | None:
        """Apply the non-empty fields; None if the profile does not exist."""
        with self._lock:
            profile = self._profiles.get(user_id)
            if profile is None:
                return None
            if email:
                profile.email = email
            if full_name:
                profile.full_name = full_name
            if bio:
                profile.bio = bio
            return profile.to_dict()


class ProductStore:
    def __init__(self, products: list[Product] | None = None):
        self._lock = threading.Lock()
        self._products = {p.id: p for p in (products or [])}
        self._next_id = max(self._products, default=0) + 1

    def list_all(self) -> list[dict]:
        with self._lock:
            return [p.to_dict() for p in self._products.values()]

    def get(self, product_id: int) -> dict | None:
        with self._lock:
            product = self._products.get(product_id)
            return product.to_dict() if product else None

    def create(
        self,
        name: str,
        price: float,
        *,
        description: str | None = None,
        category: str | None = None,
        image: str | None = None,
    ) -> dict:
        with self._lock:
            product = Product(
                id=self._next_id,
                name=name,
                description=description or DEFAULT_DESCRIPTION,
                price=float(price),
                category=category or DEFAULT_CATEGORY,
                image=image or DEFAULT_IMAGE,
            )
            self._products[product.id] = product
            self._next_id += 1
            return product.to_dict()


class InventoryStore:
    def __init__(self, records: list[StockRecord] | None = None):
        self._lock = threading.Lock()
        self._records = {r.product_id: r for r in (records or [])}

    def list_all(self) -> list[dict]:
        with self._lock:
            return [r.to_dict() for r in self._records.values()]

    def get(self, product_id: int) -> dict | None:
        with self._lock:
            record = self._records.get(product_id)
            return record.to_dict() if record else None

    def set_stock(self, product_id: int, stock: int | float) -> tuple[dict, int | float | None]:
        """Upsert: returns (record, previous stock or None when the record was created)."""
        if stock < 0:
            raise ValueError("stock must be non-negative")
        with self._lock:
            record = self._records.get(product_id)
            if record is None:
                record = StockRecord(product_id, stock, DEFAULT_WAREHOUSE)
                self._records[product_id] = record
                return record.to_dict(), None
            previous = record.stock
            record.stock = stock
            return record.to_dict(), previous
