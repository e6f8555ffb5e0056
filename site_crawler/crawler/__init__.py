"""site_crawler.crawler: coordinator, workers, transport and link policy."""
