# storefront/fixtures.py
"""
Sample catalog.

Used twice: seed_database.py loads it into a fresh database, and the
storefront client falls back to it when the API cannot be reached.
Ids are fixed so both copies agree.
"""

SAMPLE_PRODUCTS: list[dict] = [
    {
        "id": "65a1f0c2e4b0a1b2c3d4e501",
        "name": "Wireless Bluetooth Headphones",
        "description": (
            "Premium wireless headphones with active noise cancellation, "
            "30-hour battery life, and superior sound quality."
        ),
        "price": 99.99,
        "category": "Electronics",
        "image_url": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=500",
        "images": [
            "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=500",
            "https://images.unsplash.com/photo-1484704849700-f032a568e944?w=500",
        ],
        "stock": 50,
        "rating": 4.5,
        "specifications": {
            "brand": "AudioTech",
            "color": "Black",
            "weight": "250g",
            "connectivity": "Bluetooth 5.0",
        },
    },
    {
        "id": "65a1f0c2e4b0a1b2c3d4e502",
        "name": "Smart Fitness Watch",
        "description": (
            "Heart rate monitoring, GPS, sleep tracking and a 7-day battery."
        ),
        "price": 149.99,
        "category": "Electronics",
        "image_url": "https://images.unsplash.com/photo-1523275335684-37898b6baf30?w=500",
        "images": ["https://images.unsplash.com/photo-1523275335684-37898b6baf30?w=500"],
        "stock": 35,
        "rating": 4.3,
        "specifications": {
            "brand": "FitTech",
            "color": "Silver",
            "display": "1.4 inch AMOLED",
            "waterResistant": "5ATM",
        },
    },
    {
        "id": "65a1f0c2e4b0a1b2c3d4e503",
        "name": "Classic Denim Jacket",
        "description": "Timeless denim jacket made from premium cotton.",
        "price": 79.99,
        "category": "Clothing",
        "image_url": "https://images.unsplash.com/photo-1551028719-00167b16eac5?w=500",
        "images": ["https://images.unsplash.com/photo-1551028719-00167b16eac5?w=500"],
        "stock": 100,
        "rating": 4.7,
        "specifications": {
            "material": "100% Cotton",
            "fit": "Regular",
            "care": "Machine washable",
        },
    },
    {
        "id": "65a1f0c2e4b0a1b2c3d4e504",
        "name": "JavaScript: The Definitive Guide",
        "description": "Comprehensive guide to modern JavaScript and web development.",
        "price": 49.99,
        "category": "Books",
        "image_url": "https://images.unsplash.com/photo-1532012197267-da84d127e765?w=500",
        "images": ["https://images.unsplash.com/photo-1532012197267-da84d127e765?w=500"],
        "stock": 75,
        "rating": 4.8,
        "specifications": {
            "author": "David Flanagan",
            "publisher": "O'Reilly Media",
            "pages": "706",
        },
    },
    {
        "id": "65a1f0c2e4b0a1b2c3d4e505",
        "name": "Ceramic Coffee Mug Set",
        "description": "Set of four stoneware mugs, dishwasher and microwave safe.",
        "price": 34.5,
        "category": "Home",
        "image_url": "https://images.unsplash.com/photo-1514228742587-6b1558fcca3d?w=500",
        "images": [],
        "stock": 60,
        "rating": 4.4,
        "specifications": {"capacity": "350ml", "pieces": "4"},
    },
    {
        "id": "65a1f0c2e4b0a1b2c3d4e506",
        "name": "Yoga Mat",
        "description": "Non-slip 6mm exercise mat with carrying strap.",
        "price": 29.99,
        "category": "Sports",
        "image_url": "https://images.unsplash.com/photo-1601925260368-ae2f83cf8b7f?w=500",
        "images": [],
        "stock": 0,
        "rating": 4.1,
        "specifications": {"thickness": "6mm", "material": "TPE"},
    },
]
