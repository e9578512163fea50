"""
API server package: HTTP interface for the relay and dashboard views.

Holds no chain state of its own; every request is answered from the relay,
the adapter or the poller's last snapshot.
"""
