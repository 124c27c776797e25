"""
Core domain models and exceptions of vrotate.

Modules:
    exceptions.py: The exception hierarchy. Fatal kinds abort the run, the
                   per-file kinds are caught by the pipeline and logged.
    media.py: ``StreamInfo``/``ContainerInfo`` and ``probe_media``, which runs
              ffprobe through ffmpeg-python and parses its JSON output.
    options.py: ``ConversionOptions`` and ``ToolPaths``, the read-only values
                built once at startup.
    placement.py: ``HerePlacement``/``DirectoryPlacement``, which derive the
                  output path of an input and decide whether to skip it.
"""
