"""perpcore -- trade preview, position reconstruction and order encoding for GMX V2 perpetuals."""

__version__ = "0.1.0"
