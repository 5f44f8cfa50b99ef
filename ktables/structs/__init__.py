"""
All the data structures used by the listing core: K8s-originated bodies,
resource & kind references, options, settings, credentials.

Since they are used everywhere, they cannot have dependencies on the other
parts of the library, except for each other.
"""
