"""
Common Error Constants

Centralized error messages shared by routers, the cart engine and the CLI.
"""

# Cart errors
ERROR_MISSING_SIZE = "missing size"
ERROR_INVALID_QUANTITY = "invalid quantity"
MESSAGE_SELECT_SIZE = "Please select a size"
MESSAGE_INVALID_QUANTITY = "Quantity must be at least 1"
MESSAGE_ITEM_ADDED = "Item added to cart"

# Checkout errors
ERROR_CHECKOUT_EMPTY_BRAND = "No items in cart for this brand"

# Product errors
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_INVALID_PRODUCT_ID = "Invalid product ID format"
ERROR_FETCH_PRODUCTS = "Error fetching products"
ERROR_FETCH_PRODUCT = "Error fetching product"
ERROR_FETCH_FEATURED = "Error fetching featured products"

# Brand errors
ERROR_BRAND_NOT_FOUND = "Brand not found"
ERROR_FETCH_BRANDS = "Error fetching brands"
ERROR_FETCH_BRAND = "Error fetching brand"
ERROR_FETCH_CATEGORIES = "Error fetching categories"

# Generic errors
ERROR_ROUTE_NOT_FOUND = "Route not found"
ERROR_INTERNAL = "Something went wrong!"
ERROR_REQUEST_FAILED = "An error occurred"
ERROR_INVALID_REQUEST = "Invalid request"
