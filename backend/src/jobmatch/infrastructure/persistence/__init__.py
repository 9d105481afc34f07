"""Persistence - ORM models, repositories and unit of work"""
