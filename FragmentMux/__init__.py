# 29.09.26

from .upload.version import __version__, __title__
