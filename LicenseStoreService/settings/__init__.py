"""
Settings for the license store.

``base`` holds everything read from the environment; ``dev``, ``test`` and
``prod`` override it. Select one with ``DJANGO_SETTINGS_MODULE``.
"""
