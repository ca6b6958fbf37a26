"""Sources of weekly readings: admin submissions and seed history."""
