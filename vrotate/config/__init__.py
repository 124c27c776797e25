"""
Configuration package for vrotate.

Static settings live in ``common`` (logging, naming, user config location) and
``video`` (tool names, fixed command flags, the built-in codec table). The
optional ``config.user.yaml`` file is read by ``user.load_user_config`` and
never touches these module constants: the values it yields are passed
explicitly to the components that need them.
"""
