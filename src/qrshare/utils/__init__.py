"""Small helpers shared across qrshare: logging setup and address lookup."""
