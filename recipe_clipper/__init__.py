"""Recipe Clipper: scrape recipe pages into structured recipes."""

__version__ = "1.0.0"
