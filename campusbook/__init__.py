"""CampusBook seminar-hall reservation service."""
