"""Drive a Terraform Cloud/Enterprise run to completion and collect its outputs."""

__version__ = "0.1.0"
