"""
Mock analytics and tweet API for testing OAuth 1.0 signed requests.
"""

from .server import create_app, run_server
