"""
All the routines to talk to the Kubernetes API.

The underlying HTTP library (now, ``httpx``) is used only inside this package:
the rest of the client operates with its own structures and errors.
"""
