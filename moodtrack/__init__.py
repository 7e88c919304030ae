"""Personal mood tracker: mood catalog, entry store and statistics."""
