"""
Infrastructure Services
Concrete service implementations wired to SQLAlchemy
"""
