"""culprit - find the unit responsible for a problem by toggling units."""
