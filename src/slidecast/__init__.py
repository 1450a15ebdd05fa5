"""Slidecast — present markdown slides from the terminal, live in every browser.

The presenter drives the deck with the keyboard; every connected browser
follows the presenter's slide over a long-lived event stream.

Quick start::

    import slidecast

    slidecast.present("talk.md")

Two modes::

    slidecast.present("talk.md")                # Serve and control live
    slidecast.export("talk.md", "talk.html")    # Standalone HTML file

Building blocks (usable on their own, e.g. in tests)::

    from slidecast.live import ChangeSignal, StateStore, StreamHandler
    from slidecast.control import Controller, decode_key

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0.dev0"
__all__ = [
    "SlidecastConfig",
    "__version__",
    "export",
    "present",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import slidecast`` fast; the web stack is only imported when a
    presentation is actually served.
    """
    if name == "SlidecastConfig":
        from slidecast.config import SlidecastConfig

        return SlidecastConfig

    if name == "present":
        from slidecast.app import present

        return present

    if name == "export":
        from slidecast.app import export

        return export

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
