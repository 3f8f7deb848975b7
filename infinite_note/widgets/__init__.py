"""Qt widgets for Infinite Note"""
