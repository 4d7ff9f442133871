"""Apex job log links for Salesforce job-listing pages."""

__version__ = "0.1.0"
