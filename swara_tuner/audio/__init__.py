"""Signal chain and audio sources.

The sounddevice and soundfile sources are not imported here so that the
detector can be used without PortAudio installed.
"""
