"""HTTP service building blocks: path cleaning, run mode, file systems, response writing, log formatting, client IPs and redirects."""

__version__ = "0.1.0"