"""Building engines from configuration files."""
