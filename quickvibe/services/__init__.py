"""Services for quickvibe."""
