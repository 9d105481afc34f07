"""
JobMatch application engine
Application lifecycle, transition rules and skill matching for a job board
"""

__version__ = "1.0.0"
