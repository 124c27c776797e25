"""
Services package for vrotate.

A service performs one step of the per-file flow:

- **File Processing Service (`ProcessVideoFiles`):** lists the candidate files
  directly under the input root.
- **Encoding Service (`CodecArgumentTable`, `select_encode_args`, `Encoder`):**
  picks the encoder arguments and supervises the ffmpeg subprocess.
- **Logging Service (`ConversionReport`):** tallies the outcome of every file
  and writes the optional YAML report.
"""
