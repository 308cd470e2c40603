"""
Catalog app: products with price, discount and stock.
"""
