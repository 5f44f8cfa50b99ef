"""
All the routines to talk to Kubernetes API.

This package is supposed to be mocked when the mocked K8s client is needed,
and only the high-level logic has to be tested, not the API calls themselves.

Beware: this is NOT a Kubernetes client. It is a set of dedicated adapters
specially tailored to the listing core's tasks (discovery, table & list
fetching), not the generic Kubernetes object manipulation.
"""
