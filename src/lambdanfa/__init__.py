"""Lambda NFA engine: epsilon-NFA membership and longest-prefix queries."""

__version__ = (1, 0, 0)


def versionstring(build=True):
    """Returns the version number as a string.

    :param build: if False, the last (build) component is left off.
    """

    v = __version__ if build else __version__[:-1]
    return ".".join(str(x) for x in v)
