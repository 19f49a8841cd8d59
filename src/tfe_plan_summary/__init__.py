"""Summarize the latest speculative Terraform Cloud/Enterprise plan for CI."""

__version__ = "0.1.0"
