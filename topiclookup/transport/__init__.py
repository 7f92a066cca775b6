"""REST transport and the event loop it runs on."""

from topiclookup.transport.http import HttpTransport, LookupTransport
from topiclookup.transport.loop import EventLoopThread

__all__ = ["HttpTransport", "LookupTransport", "EventLoopThread"]
