"""Bot services: API clients, mention loop, commit announcements, OAuth exchange."""
