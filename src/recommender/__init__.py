"""Product/user affinity module.

This module builds the normalization context from the product catalog and
user purchase history, encodes products and users into weighted feature
vectors, assembles user x product training sets and trains a small dense
network that scores how likely a user is to buy a product.
"""
