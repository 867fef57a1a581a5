"""Recipe catalog: bulk-loaded recipe table served over a small REST API."""
