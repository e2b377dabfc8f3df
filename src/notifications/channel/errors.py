class DeliveryError(Exception):
    """A channel could not hand a notification to its transport."""
