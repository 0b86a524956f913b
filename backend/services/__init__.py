"""
Game services: movement, collisions, food placement, the engine and its clock.
"""
