"""Dashboard service: poller, panels and HTTP API"""
