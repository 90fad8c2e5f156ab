"""Shared configuration, logging, error handling and I/O helpers for roagen."""
