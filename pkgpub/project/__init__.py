"""Project manifest loading and build summary."""
