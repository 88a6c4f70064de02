"""Config, logging, request boundary, dan reporting."""
