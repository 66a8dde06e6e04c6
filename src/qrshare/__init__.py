"""qrshare -- Share a single file with nearby devices via a QR code.

Starts a short-lived HTTP server on the local network, shows a scannable
code for the download URL, and exits on its own once the last viewer of
the status page has gone away.
"""

__version__ = "0.1.0"
