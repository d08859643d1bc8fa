"""Pricing tier classification module.

Classifies a person into a pricing tier (premium, medium, basic) from their
normalized age and one-hot encoded favourite color and location.
"""
