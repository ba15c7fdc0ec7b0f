"""Financial headline scraper."""
