"""Configuration, logging, errors and backend transport."""
