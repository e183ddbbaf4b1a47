"""Use-case layer: the user proxy and the commands registered on the facade.

Each module coordinates domain objects and ports without performing transport
I/O directly; adapters are reached only through ``loginbus.domain.ports``.
"""
