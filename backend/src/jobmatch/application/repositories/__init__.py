"""Repository interfaces"""
