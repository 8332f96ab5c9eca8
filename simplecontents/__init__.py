"""Content records with metadata, in-memory and SQL repositories, in-memory storage and a service layer."""

__version__ = "0.1.0"