"""Notification feed and activity audit service for the roster application.

The package is split in layers: ``domain`` holds plain entities, ``application``
the use cases, ``infrastructure`` persistence and realtime delivery, and
``interfaces`` the HTTP/websocket API.
"""
