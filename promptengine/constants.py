"""Categories offered in the category picker"""

CATEGORIES = [
    "Beauty & Personal Care",
    "Health, Household & Baby Care",
    "Clothing, Shoes & Jewelry",
    "Women's Fashion",
    "Men's Fashion",
    "Kids' & Baby Fashion",
    "Luxury Stores",
    "Electronics & Tech",
    "Cell Phones & Accessories",
    "Computers & Tablets",
    "Home & Kitchen",
    "Pet Supplies",
    "Garden & Outdoor",
    "Appliances",
    "Tools & Home Improvement",
    "Automotive Parts",
    "Grocery & Gourmet Food",
    "Sports & Outdoors",
    "Musical Instruments",
    "Office Products",
    "Toys & Games",
    "Arts, Crafts & Sewing",
    "Books & Media",
    "Collectibles & Fine Art",
    "Handmade Products",
    "Luggage & Travel Gear",
    "Industrial & Scientific",
]

DEFAULT_CATEGORY = CATEGORIES[0]
