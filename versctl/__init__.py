"""Config, project files, build archives, SSH/SCP commands and status text for Vers environments."""

__version__ = "0.1.0"