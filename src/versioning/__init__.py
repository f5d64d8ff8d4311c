"""Version comparison and dependency classification."""
