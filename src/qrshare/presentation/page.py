"""Status page served to anyone who opens the server in a browser.

The page shows the QR code and the download URL. Its script keeps a
WebSocket open to ``/ws``, sends ``heartbeat`` every few seconds while the
page is open, and sends ``close`` when the page is being unloaded.
"""

from __future__ import annotations

import html
import json
from string import Template

from qrshare.session.models import ViewerSignal

_PAGE = Template("""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>QR Share - $file_name</title>
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
            display: flex;
            flex-direction: column;
            align-items: center;
            justify-content: center;
            height: 100vh;
            margin: 0;
            background-color: #f0f0f0;
        }
        .container {
            text-align: center;
            padding: 20px;
            background-color: white;
            border-radius: 10px;
            box-shadow: 0 2px 10px rgba(0,0,0,0.1);
            max-width: 600px;
            width: 90%;
        }
        img { max-width: 300px; margin: 20px 0; }
        .url {
            word-break: break-all;
            margin: 10px 0;
            padding: 10px;
            background-color: #f8f8f8;
            border-radius: 5px;
            font-family: monospace;
        }
        #status { color: #666; margin-top: 10px; }
    </style>
</head>
<body>
    <div class="container">
        <h2>Scan to download $file_name</h2>
        <img src="$qr_data_url" alt="QR Code">
        <p class="url"><a href="$url">$url</a></p>
        <p id="status">Server running. You can close this window when done sharing.</p>
    </div>
    <script>
        const scheme = window.location.protocol === 'https:' ? 'wss://' : 'ws://';
        const ws = new WebSocket(scheme + window.location.host + '/ws');

        setInterval(() => {
            if (ws.readyState === WebSocket.OPEN) {
                ws.send($heartbeat_message);
            }
        }, $heartbeat_ms);

        ws.addEventListener('close', () => {
            document.getElementById('status').textContent = 'Sharing has ended.';
        });

        window.addEventListener('beforeunload', () => {
            if (ws.readyState === WebSocket.OPEN) {
                ws.send($close_message);
            }
        });
    </script>
</body>
</html>
""")


def render_status_page(
    file_name: str,
    qr_data_url: str,
    url: str,
    heartbeat_interval: float = 5.0,
) -> str:
    """Render the status page HTML.

    Args:
        file_name: Name of the shared file, shown in the title.
        qr_data_url: ``data:`` URL of the QR code image.
        url: The download URL the QR code encodes.
        heartbeat_interval: Seconds between heartbeats sent by the page.
    """
    return _PAGE.substitute(
        file_name=html.escape(file_name),
        qr_data_url=html.escape(qr_data_url, quote=True),
        url=html.escape(url, quote=True),
        heartbeat_ms=max(1, int(heartbeat_interval * 1000)),
        heartbeat_message=json.dumps(ViewerSignal.HEARTBEAT.value),
        close_message=json.dumps(ViewerSignal.CLOSE.value),
    )
