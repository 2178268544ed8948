"""Services package for backend business logic."""
