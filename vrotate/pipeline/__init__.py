"""
The rotation pipeline: walks the input, decides per file, and drives the
encoder one file at a time.
"""
