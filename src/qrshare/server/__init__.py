"""HTTP front door for qrshare.

Serves the shared file and the status page, and carries the viewers'
heartbeat channels to the session engine.
"""
