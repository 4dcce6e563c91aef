"""
Minimal asyncio HTTP/1.1 server exposing the record store over JSON.
"""

from http_server.request import BadRequest, Request
from http_server.response import Response, response
from http_server.server import HTTPServer

__all__ = ["BadRequest", "HTTPServer", "Request", "Response", "response"]
