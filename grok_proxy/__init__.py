"""Grok Proxy

A proxy server that translates OpenAI-shaped API requests into Grok API calls.
"""

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("grok-proxy")
except PackageNotFoundError:
    __version__ = "1.0.0"
__author__ = "Grok Proxy"
