"""Application composition layer.

The facade implements the notification bus; the controller wires adapters,
the user proxy and commands into it; ``main`` exposes the three actions on
the command line.
"""
