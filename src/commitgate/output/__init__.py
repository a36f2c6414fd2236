"""Issue reporters."""
