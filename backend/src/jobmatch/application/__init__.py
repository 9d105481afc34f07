"""Application layer - repository and service contracts"""
