"""
DDNS Linode - A Synology DDNS provider script for Linode DNS.

This package provides a one-shot command that the Synology DDNS service
invokes whenever the NAS's IP address may have changed. It updates a
Linode DNS record and reports a DDNS result code on stdout.
"""

__version__ = "0.1.0"
__author__ = "DDNS Linode Contributors"
