"""
Trading bounded context, domain layer.

Money arithmetic, trade pricing, the settlement engine
and the ports it needs from the outside world.
"""
