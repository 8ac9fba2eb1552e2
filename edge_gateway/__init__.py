"""Edge gateway forwarding browser API calls to the marketplace backend."""
