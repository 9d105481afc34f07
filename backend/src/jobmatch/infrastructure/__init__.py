"""Infrastructure layer - SQLAlchemy persistence and service implementations"""
