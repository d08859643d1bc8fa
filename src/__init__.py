"""ShopAffinity: small neural networks for pricing tiers and product affinity.

This package builds numeric feature vectors from raw product/user records and
trains small dense networks on them with TensorFlow/Keras.

Modules:
    features: Normalization and one-hot encoding helpers
    recommender: Affinity context, encoding, training and ranking
    tiers: Pricing tier classifier
    worker: Message-driven training workers
    api: FastAPI transport for the worker protocol
"""

__version__ = "0.1.0"
