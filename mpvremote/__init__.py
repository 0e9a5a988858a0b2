"""
mpvremote - playback progress and collection store for the mpv remote service.
"""

__version__ = "0.1.0"
