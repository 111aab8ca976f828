"""Analytics app package: dashboard figures over bookings."""
