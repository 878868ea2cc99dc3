"""Transports dispatching requests to the Discord REST API."""

from .base import Deleter, Getter, Patcher, Poster, Request, Response, Transport

__all__ = ["Deleter", "Getter", "Patcher", "Poster", "Request", "Response", "Transport"]
