"""Infrastructure layer — operational plumbing for the tuner service.

Modules:
    metrics     Prometheus metrics registry.
"""
