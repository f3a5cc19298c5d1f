"""SnackShop backend - storefront for AI-imagined snacks"""
