"""Service interfaces"""
