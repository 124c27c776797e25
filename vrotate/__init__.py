"""
vrotate: batch re-encoding ("rotation") of the video files found under a path.

The package is split the same way the processing flows:

- ``config``: static settings and the optional YAML user configuration.
- ``domain``: immutable data models (probe results, options, tool paths) and
  the exception hierarchy.
- ``services``: file discovery, output placement, argument selection, the
  encoder subprocess supervisor, and the run report.
- ``pipeline``: the driver that ties the services together for one run.
- ``utils``: tool lookup and formatting helpers.
"""

__version__ = "0.1.0"
