"""Pydantic schemas shared between the Hive client and its test backend."""
