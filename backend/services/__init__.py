"""
Services around the game engine: layout, tick scheduling, session hosting
and frame rendering.
"""
