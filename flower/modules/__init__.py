"""Feature modules: accounts and watering."""
