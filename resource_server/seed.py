"""
Demo records loaded into each resource service at startup.
Each call returns fresh objects so separate store instances never share state.
"""
from resource_server.stores import Product, Profile, StockRecord


def seed_profiles() -> list[Profile]:
    return [
        Profile(1, "alice", "alice@example.com", "Alice Johnson", "Platform administrator", "https://i.pravatar.cc/150?u=alice"),
        Profile(2, "bob", "bob@example.com", "Bob Smith", "Regular shopper", "https://i.pravatar.cc/150?u=bob"),
        Profile(3, "charlie", "charlie@example.com", "Charlie Brown", "New customer", "https://i.pravatar.cc/150?u=charlie"),
    ]


def seed_products() -> list[Product]:
    return [
        Product(1, "Wireless Headphones", "Noise-cancelling Bluetooth headphones", 79.99, "Electronics", "https://via.placeholder.com/200?text=Headphones"),
        Product(2, "Running Shoes", "Lightweight breathable running shoes", 129.99, "Footwear", "https://via.placeholder.com/200?text=Shoes"),
        Product(3, "Coffee Maker", "Programmable 12-cup coffee maker", 49.99, "Kitchen", "https://via.placeholder.com/200?text=Coffee"),
        Product(4, "Backpack", "Water-resistant laptop backpack", 59.99, "Accessories", "https://via.placeholder.com/200?text=Backpack"),
        Product(5, "Desk Lamp", "LED desk lamp with adjustable brightness", 34.99, "Home Office", "https://via.placeholder.com/200?text=Lamp"),
        Product(6, "Yoga Mat", "Non-slip exercise yoga mat", 24.99, "Fitness", "https://via.placeholder.com/200?text=YogaMat"),
        Product(7, "Mechanical Keyboard", "RGB mechanical gaming keyboard", 89.99, "Electronics", "https://via.placeholder.com/200?text=Keyboard"),
        Product(8, "Water Bottle", "Insulated stainless steel water bottle", 19.99, "Accessories", "https://via.placeholder.com/200?text=Bottle"),
    ]


def seed_inventory() -> list[StockRecord]:
    return [
        StockRecord(1, 50, "A"),
        StockRecord(2, 30, "B"),
        StockRecord(3, 100, "A"),
        StockRecord(4, 15, "C"),
        StockRecord(5, 75, "A"),
        StockRecord(6, 200, "B"),
        StockRecord(7, 8, "C"),
        StockRecord(8, 0, "B"),
    ]
