"""Starter .gitpane.toml template."""

DEFAULT_TOML = """\
# gitpane configuration
version = "1.0"

[git]
executable = "git"
timeout = 30              # seconds before a capturing command is abandoned; 0 = never

[log]
recent_count = 5          # commits shown by `gitpane log` without arguments

[output]
format = "terminal"       # terminal | json | yaml
"""
