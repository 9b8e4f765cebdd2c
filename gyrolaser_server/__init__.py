"""Socket.IO server package for GyroLaser.

Components:
- server: aiohttp + python-socketio relay server and its entry point
- http_routes: QR code, static client and health routes
- client: headless controller that streams a synthetic pointer path
"""
