"""Commander Siege: a turn-based siege simulator with AI-personality commanders."""

__version__ = "0.1.0"
