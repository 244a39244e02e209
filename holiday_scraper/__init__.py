"""Holiday-Scraper: fetch a public holiday table and store it per year."""

__version__ = "0.1.0"
