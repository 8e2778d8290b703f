"""HTTP boundary for the applog diagnostic logger."""
