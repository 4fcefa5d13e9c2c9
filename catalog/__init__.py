"""
Product catalog API: list, fetch, create, update and delete products
stored in a MongoDB collection.
"""
