"""Feature encoding helpers shared by the tier classifier and the recommender."""
