"""Route modules for the ShopAffinity API."""
