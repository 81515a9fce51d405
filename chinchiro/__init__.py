"""
Chinchiro - round-based banker-vs-challengers dice game.
"""
