"""Relational store: connection pool, schema and queries"""
from active_break.db.connection import Database

__all__ = ["Database"]
