"""netmon — see which processes own which sockets, and kill listeners by port."""

__version__ = "0.1.0"
