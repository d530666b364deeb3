"""Latency benchmark for Kubernetes-hosted GitHub Actions runner controllers."""

__version__ = "0.1.0"
