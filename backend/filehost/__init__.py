"""PDF and image host with per-category metadata indexes."""
