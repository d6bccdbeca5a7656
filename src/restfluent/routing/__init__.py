"""Routing — path template compilation, route definitions and the registry.

Routes are declared during bootstrap and handed to the host once, at
registration time.
"""
