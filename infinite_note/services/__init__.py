"""Persistence and export services for Infinite Note"""
