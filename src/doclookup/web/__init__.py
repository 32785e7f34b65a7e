"""Web API and static search page."""
