"""Presenter control — key decoding, the controller, and the terminal console."""

from slidecast.control.commands import Command, decode_key, decode_line
from slidecast.control.console import Console
from slidecast.control.controller import Controller

__all__ = [
    "Command",
    "Console",
    "Controller",
    "decode_key",
    "decode_line",
]
