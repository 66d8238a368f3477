"""Domain models, protocols and errors for the content generation core."""
