"""Core models: domain enums/validators and API I/O schemas."""
