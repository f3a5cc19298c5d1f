"""Reference data for imagined snack products.

Per-category emoji, price ranges, nutrition baselines and base ingredients,
plus the shared pools of exotic ingredients, origins and name fragments.
"""

from ...domain.shop import Category

EMOJI_MAP = {
    Category.CHIPS: ["🥔", "🍟", "🥨", "🥖", "🌽", "🧀"],
    Category.CANDY: ["🍬", "🍭", "🍫", "🍰", "🧁", "🍮"],
    Category.DRINKS: ["🥤", "🧃", "🧋", "🍹", "🥛", "🧊"],
    Category.CHOCOLATE: ["🍫", "🍪", "🍩", "🧇", "🥮", "🍯"],
    Category.COOKIES: ["🍪", "🥠", "🧈", "🥐", "🥯", "🍞"],
    Category.INTERNATIONAL: ["🌮", "🍜", "🍙", "🍱", "🥟", "🍡"],
    Category.SAVORY: ["🥓", "🍖", "🥩", "🦴", "🍗", "🧆"],
    Category.SPICY: ["🌶️", "🔥", "💥", "🥵", "🌋", "⚡"],
}

# (min, max) in USD
PRICE_RANGES = {
    Category.CHIPS: (2.0, 6.0),
    Category.CANDY: (1.5, 4.0),
    Category.DRINKS: (3.0, 8.0),
    Category.CHOCOLATE: (3.0, 9.0),
    Category.COOKIES: (3.0, 7.0),
    Category.INTERNATIONAL: (4.0, 12.0),
    Category.SAVORY: (4.0, 10.0),
    Category.SPICY: (3.0, 9.0),
}

NUTRITION_BASE = {
    Category.CHIPS: {"calories": 150, "protein": 2, "carbs": 15, "fat": 9, "sodium": 180, "sugar": 1},
    Category.CANDY: {"calories": 120, "protein": 0, "carbs": 28, "fat": 2, "sodium": 20, "sugar": 22},
    Category.DRINKS: {"calories": 140, "protein": 0, "carbs": 36, "fat": 0, "sodium": 50, "sugar": 35},
    Category.CHOCOLATE: {"calories": 200, "protein": 3, "carbs": 24, "fat": 11, "sodium": 30, "sugar": 20},
    Category.COOKIES: {"calories": 180, "protein": 2, "carbs": 26, "fat": 8, "sodium": 120, "sugar": 14},
    Category.INTERNATIONAL: {"calories": 160, "protein": 4, "carbs": 20, "fat": 7, "sodium": 200, "sugar": 6},
    Category.SAVORY: {"calories": 170, "protein": 5, "carbs": 18, "fat": 9, "sodium": 250, "sugar": 3},
    Category.SPICY: {"calories": 155, "protein": 3, "carbs": 17, "fat": 8, "sodium": 220, "sugar": 4},
}

BASE_INGREDIENTS = {
    Category.CHIPS: ["Potatoes", "Vegetable Oil", "Sea Salt"],
    Category.CANDY: ["Sugar", "Corn Syrup", "Natural Flavors"],
    Category.DRINKS: ["Carbonated Water", "Cane Sugar", "Natural Flavors"],
    Category.CHOCOLATE: ["Cocoa", "Sugar", "Milk", "Cocoa Butter"],
    Category.COOKIES: ["Wheat Flour", "Sugar", "Butter", "Eggs"],
    Category.INTERNATIONAL: ["Rice", "Seaweed", "Soy Sauce", "Sesame Oil"],
    Category.SAVORY: ["Wheat", "Cheese", "Yeast", "Salt"],
    Category.SPICY: ["Chili Peppers", "Paprika", "Garlic", "Onion"],
}

EXOTIC_INGREDIENTS = [
    "Yuzu Extract",
    "Matcha Powder",
    "Black Garlic",
    "Truffle Oil",
    "Saffron",
    "Lychee",
    "Dragon Fruit",
    "Ube",
    "Miso",
    "Gochugaru",
    "Tahini",
    "Sumac",
    "Za'atar",
    "Cardamom",
]

ALLERGEN_MAP = {
    "Milk": "Dairy",
    "Butter": "Dairy",
    "Cheese": "Dairy",
    "Wheat": "Gluten",
    "Wheat Flour": "Gluten",
    "Eggs": "Eggs",
    "Peanuts": "Peanuts",
    "Soy Sauce": "Soy",
    "Sesame Oil": "Sesame",
    "Tahini": "Sesame",
}

ORIGINS = [
    "Japan", "Korea", "Thailand", "Mexico", "Italy", "France",
    "India", "Morocco", "Peru", "Brazil", "Turkey", "Spain",
]

NAME_PREFIXES = ["Exotic", "Supreme", "Legendary", "Ultimate", "Divine", "Cosmic", "Mystical", "Imperial"]
NAME_SUFFIXES = ["Crunch", "Delight", "Fusion", "Blast", "Sensation", "Wave", "Dream", "Paradise"]
NAME_ADJECTIVES = ["Spicy", "Sweet", "Tangy", "Savory", "Zesty", "Bold", "Wild", "Premium"]

DESCRIPTION_TEMPLATES = [
    "Experience the unique blend of exotic flavors in every bite of {name}. A {category} snack like no other.",
    "{name} brings together the perfect combination of taste and texture. An unforgettable {category} experience.",
    "Discover the extraordinary with {name}. This {category} snack will transport your taste buds to new heights.",
    "{name} is a masterpiece of flavor. Each bite delivers a unique {category} experience you won't forget.",
    "Indulge in the exotic taste of {name}. A premium {category} snack crafted for adventurous palates.",
]

SWEET_CATEGORIES = {Category.CANDY, Category.CHOCOLATE, Category.COOKIES}
SAVORY_CATEGORIES = {Category.CHIPS, Category.SAVORY}
