"""KursWatch: rolling 7-day exchange-rate dashboard with live updates."""

__version__ = "0.1.0"
